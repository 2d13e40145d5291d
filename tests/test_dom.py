"""Tests for dom.py – calendar grid and leaf text markup fallbacks."""
from bs4 import BeautifulSoup

from src.pool_times.dom import (
    CalendarGridMarkup,
    LeafTextMarkup,
    parse_calendar_event,
    parse_markup,
)
from src.pool_times.models import RawSource

GRID_HTML = """
<table><tr>
  <td class="fc-timegrid-col" data-date="2024-02-23">
    <a class="fc-event fc-event-start fc-timegrid-event"
       aria-label="Center *Britannia Feb 23, 2024 10:00 AM - 11:00 AM Activity |Lane Swim| Britannia Pool">
      <div>|Lane Swim|Britannia Pool</div>
    </a>
    <a class="fc-event fc-event-end fc-timegrid-event"
       aria-label="Center *Britannia Feb 22, 2024 11:00 PM - 1:00 AM Activity |Overnight| Pool">
      <div>|Overnight|Pool</div>
    </a>
  </td>
  <td class="fc-timegrid-col" data-date="2024-02-24">
    <a class="fc-event fc-event-start fc-timegrid-event"><div>|Aquafit| Leisure Pool</div></a>
  </td>
  <td class="fc-timegrid-col" data-date="2024-02-25"></td>
</tr></table>
"""

LEAF_HTML = """
<html><head><title>Pool</title><script>var label = "Mon Feb 26 9:00 am - 10:00 am";</script></head>
<body>
<div class="week">
  <div class="day">
    <h3>Fri Feb 23</h3>
    <div class="session"><span class="name">Lane Swim</span> <span class="time">10:00 am - 11:00 am</span></div>
    <div class="session">Aquafit<div><span>6:00 pm - 7:30 pm</span></div></div>
  </div>
  <div class="day">
    <h3>Saturday, February 24</h3>
    <div class="session"><span>Public Swim</span><span>1:00 pm – 3:00 pm</span></div>
  </div>
</div>
<div class="flat">
  <h4>Sat Mar 2</h4><h4>Sun Mar 3</h4>
  <p>Family Swim 1:00 pm - 3:00 pm</p>
</div>
</body></html>
"""


def _markup(payload):
    return RawSource(kind="markup", provenance="markup[0]", payload=payload)


class TestCalendarGridMarkup:
    def test_reads_aria_label_and_text(self):
        records = CalendarGridMarkup().attempt(_markup(GRID_HTML))
        assert records == [
            {
                "date": "2024-02-23",
                "name": "Lane Swim",
                "location": "Britannia Pool",
                "startTime": "10:00 AM",
                "endTime": "11:00 AM",
            },
            {
                "date": "2024-02-24",
                "name": "Aquafit",
                "location": "Leisure Pool",
                "startTime": "",
                "endTime": "",
            },
        ]

    def test_accepts_parsed_tree(self):
        soup = BeautifulSoup(GRID_HTML, "html.parser")
        assert len(CalendarGridMarkup().attempt(_markup(soup))) == 2

    def test_no_columns(self):
        assert CalendarGridMarkup().attempt(_markup("<p>Closed</p>")) is None

    def test_only_markup_sources(self):
        source = RawSource(kind="text", provenance="script[0]", payload=GRID_HTML)
        assert not CalendarGridMarkup().accepts(source)


class TestParseCalendarEvent:
    def test_text_without_location(self):
        soup = BeautifulSoup('<a class="fc-event">|Sauna|</a>', "html.parser")
        event = parse_calendar_event(soup.a)
        assert event["name"] == "Sauna"
        assert event["location"] == ""


class TestLeafTextMarkup:
    def test_associates_times_with_day_headers(self):
        records = LeafTextMarkup().attempt(_markup(LEAF_HTML))
        assert records == [
            {"date": "Fri Feb 23", "name": "Lane Swim", "time": "10:00 am - 11:00 am"},
            {"date": "Fri Feb 23", "name": "Aquafit", "time": "6:00 pm - 7:30 pm"},
            {
                "date": "Saturday, February 24",
                "name": "Public Swim",
                "time": "1:00 pm – 3:00 pm",
            },
        ]

    def test_ambiguous_ancestor_abandoned(self):
        records = LeafTextMarkup().attempt(_markup(LEAF_HTML))
        assert all(r["name"] != "Family Swim" for r in records)

    def test_no_headers(self):
        html = "<div><p>Lane Swim 10:00 am - 11:00 am</p></div>"
        assert LeafTextMarkup().attempt(_markup(html)) is None

    def test_weekday_without_month_is_not_a_header(self):
        html = "<div><h3>Fri Lane 2</h3><p>Lane Swim 10:00 am - 11:00 am</p></div>"
        assert LeafTextMarkup().attempt(_markup(html)) is None

    def test_single_header_page(self):
        html = (
            "<section><h2>Mon Feb 26</h2>"
            "<ul><li>Lane Swim <b>6:30 am - 8:00 am</b></li></ul></section>"
        )
        records = LeafTextMarkup().attempt(_markup(html))
        assert records == [
            {"date": "Mon Feb 26", "name": "Lane Swim", "time": "6:30 am - 8:00 am"}
        ]


class TestParseMarkup:
    def test_empty(self):
        assert parse_markup("") is None
        assert parse_markup(None) is None
