"""Tests for selector-driven extraction."""

from datetime import datetime, timezone

from spotlight_harvest.config import SourceConfig
from spotlight_harvest.core.fingerprint import fingerprint
from spotlight_harvest.core.types import ContentType
from spotlight_harvest.fetch.extractor import absolute_url, extract_items, parse_datetime


PAGE_URL = "https://african.business/technology/"

HTML = """
<html><body>
  <article class="post-card">
    <h2>  First
        story </h2>
    <p>Summary one</p>
    <a href="/news/first-story">Read</a>
    <img src="/img/1.jpg">
    <time datetime="2025-01-02T10:00:00Z">2 Jan</time>
  </article>
  <article><h3>No link here</h3><p>x</p></article>
  <article><a href="/news/untitled">Read more</a></article>
  <article><h2>   </h2><a href="/news/blank-title">Read</a></article>
  <article>
    <h2>Absolute</h2>
    <a href="https://african.business/news/abs#comments">x</a>
    <time datetime="not a date">soon</time>
  </article>
  <article><h2>Mail</h2><a href="mailto:desk@african.business">x</a></article>
</body></html>
"""

SOURCE = SourceConfig(
    name="african-business",
    allowed_domains=["african.business"],
    item_selector="article, .post-card",
    title_selector="h2, h3",
    description_selector="p",
    link_selector="a",
    image_selector="img",
    date_selector="time",
    tags="business",
)

HARVESTED = datetime(2025, 6, 1, tzinfo=timezone.utc)


def test_only_items_with_title_and_link_are_emitted():
    items = extract_items(HTML, PAGE_URL, SOURCE, harvested_at=HARVESTED)
    assert [i.title for i in items] == ["First story", "Absolute"]


def test_relative_links_resolved_before_fingerprinting():
    first = extract_items(HTML, PAGE_URL, SOURCE, harvested_at=HARVESTED)[0]
    assert first.link == "https://african.business/news/first-story"
    assert first.source_url == first.link
    assert first.fingerprint == fingerprint("https://african.business/news/first-story")
    assert first.image_url == "https://african.business/img/1.jpg"
    assert first.description == "Summary one"
    assert first.source_name == "african-business"
    assert first.tags == "business"
    assert first.category == "article"
    assert first.content_type is ContentType.NEWS


def test_publish_date_parsed_or_defaults_to_harvest_time():
    first, second = extract_items(HTML, PAGE_URL, SOURCE, harvested_at=HARVESTED)
    assert first.publish_date == datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)
    assert second.publish_date == HARVESTED
    assert second.link == "https://african.business/news/abs"


def test_event_source_fields():
    html = """
    <div class="event">
      <a class="title" href="/events/summit">Africa Tech Summit</a>
      <span class="where">Virtual</span>
      <span class="who">ATS Ltd</span>
    </div>
    """
    source = SourceConfig(
        name="events",
        item_selector=".event",
        title_selector=".title",
        link_selector="a",
        description_selector="",
        location_selector=".where",
        organizer_selector=".who",
        content_type="event",
        category="summit",
    )
    [item] = extract_items(html, "https://techcabal.com/events/", source)
    assert item.content_type is ContentType.EVENT
    assert item.location == "Virtual"
    assert item.organizer == "ATS Ltd"
    assert item.category == "summit"
    assert item.link == "https://techcabal.com/events/summit"
    assert item.description == ""


def test_card_that_is_itself_the_link():
    html = '<a class="card" href="/x"><h3>Card headline</h3></a>'
    source = SourceConfig(name="s", item_selector="a.card", title_selector="h3", link_selector="a")
    [item] = extract_items(html, "https://example.com/", source)
    assert item.link == "https://example.com/x"


def test_helpers():
    assert absolute_url("https://a.com/x/", "") == ""
    assert absolute_url("https://a.com/x/", "javascript:void(0)") == ""
    assert absolute_url("https://a.com/x/", "y") == "https://a.com/x/y"
    assert parse_datetime("2025-02-03T04:05:06") == datetime(2025, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    assert parse_datetime("") is None
    assert parse_datetime("yesterday") is None
