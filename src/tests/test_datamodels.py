from __future__ import annotations

from news_digest.datamodels import NewsData, NewsStory
from news_digest.widgets import StoryItem


def test_null_fields_become_empty_strings():
    data = NewsData.from_dict(
        {
            "overview": ["Rupee steady.", None],
            "themes": [
                {
                    "themeTitle": None,
                    "stories": [{"title": None, "summary": None, "context": None, "url": None}],
                }
            ],
        }
    )
    assert data.overview == ["Rupee steady."]
    assert data.themes[0].theme_title == ""
    assert data.themes[0].stories[0] == NewsStory("", "", "", None)


def test_non_string_fields_are_stringified():
    story = NewsStory.from_dict({"title": 2024, "summary": "s", "url": ""})
    assert story.title == "2024"
    assert story.url is None


def test_story_item_headline_with_null_title():
    data = NewsData.from_dict(
        {"overview": [], "themes": [{"themeTitle": "T", "stories": [{"title": None, "summary": None}]}]}
    )
    headline = StoryItem(data.themes[0].stories[0])._headline()
    assert headline.plain == "☆ "
