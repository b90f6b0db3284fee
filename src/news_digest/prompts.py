from __future__ import annotations

from typing import Sequence

from .config import TOPIC

PREFERRED_SOURCES = (
    "https://www.newswire.lk",
    "https://www.ft.lk",
    "https://www.dailymirror.lk",
    "http://www.tamilnet.com/",
    "http://www.colombopage.com",
    "http://newsfirst.lk/",
    "http://groundviews.org/",
    "http://island.lk/",
    "http://vikalpa.org/",
    "http://lankatruth.com/",
    "http://srilankawatch.com/",
    "http://www.asiantribune.com/",
    "http://sundaytimes.lk/",
    "http://dailynews.lk/",
    "http://news.lk/",
    "http://thesundayleader.lk/",
    "http://sundayobserver.lk/",
    "http://lankaweb.com/",
    "http://rivira.lk/",
    "http://adaderana.lk/",
    "http://digathanews.com/",
    "http://onlanka.com/",
    "http://sirasa.com/",
    "http://www.elankanews.com/",
    "http://www.itn.lk/",
    "http://www.rupavahini.lk/",
    "http://www.slbc.lk/",
    "http://www.sriexpress.com/",
    "http://tamilguardian.com/",
    "http://roar.media/",
    "http://www.divaina.com/",
    "http://www.lakbima.lk/",
    "http://www.lankadeepa.lk/",
    "http://onlineuthayan.com/",
    "http://www.virakesari.lk/",
    "http://www.theacademic.org/",
    "http://lankanewspapers.com/",
    "http://www.lankapage.com/",
    "http://www.srilankanewslive.com/",
    "http://www.srilankannews.net/",
    "http://maatram.org/",
)

BREAKDOWN_PROMPT = """\
Generate a thematic breakdown of all major news stories related to {topic} in the past 24 hours.
Each theme must contain at least two stories. Generate as many distinct themes as possible, provided there is enough relevant news content to support them.
All generated text, including titles, summaries, and contexts, must be written in UK English (e.g., use 'summarise' instead of 'summarize', 'colour' instead of 'color', 'normalisation' instead of 'normalization').
Exclude any sports-related news or updates. The articles can be from both foreign and domestic media outlets.
When searching for information, you MUST first check and give priority to news articles and related content published on the following websites:
{sources}

First, provide a top-level "overview" as a short, bulleted list (3-5 points) summarising the most critical developments.

Then, provide a "themes" section. For each story within a theme, provide a title, a concise one-sentence summary, a direct URL to the source article, and if it's a significant development, a brief context of what it follows up on. To establish this context, actively look for related articles from previous days or weeks (e.g., from archives) to create a clear timeline. The context must be grounded in verifiable prior events; do not speculate or create weak connections.
Do not repeat stories across different themes. Group related stories under a clear, overarching theme title.
Crucially, every story within a theme must be directly and strongly relevant to the theme's title. For example, a news story about government visa policies for foreign nationals does not belong under a theme titled "Maritime and Environmental Accountability".

IMPORTANT: Format your entire response as a single JSON object inside a markdown code block (```json ... ```).
The JSON object must have two top-level keys:
1. "overview": an array of strings, where each string is a bullet point for the summary.
2. "themes": an array of theme objects.
Each theme object must have "themeTitle" (string) and "stories" (an array of story objects).
Each story object must have "title" (string), "summary" (string), "url" (string, a direct link to the source news article), and "context" (string, can be an empty string if not applicable).
"""


def build_breakdown_prompt(
    topic: str = TOPIC, sources: Sequence[str] = PREFERRED_SOURCES
) -> str:
    return BREAKDOWN_PROMPT.format(
        topic=topic,
        sources="\n".join(f"- {s}" for s in sources),
    )
