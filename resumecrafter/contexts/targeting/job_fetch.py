"""
Job posting retrieval.

Fetches a job posting page and reduces it to the text of its main content, so
a URL can stand in for a pasted job description.

Usage:
    job_text = fetch_job_description("https://example.com/jobs/123")
"""

import os
import re
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from dotenv import load_dotenv

from resumecrafter.contexts.targeting.exceptions import JobFetchError
from resumecrafter.contexts.targeting.logger import _log_debug, _log_info

load_dotenv()

JOB_FETCH_TIMEOUT = float(os.getenv("JOB_FETCH_TIMEOUT", "30"))

# Page chrome that never holds the posting itself
NOISE_TAGS = ["script", "style", "nav", "footer", "header", "aside"]
MAIN_CONTENT_SELECTOR = 'main, article, [role="main"], .job-description, #job-description'

_WHITESPACE = re.compile(r"\s+")


def html_to_job_text(html: str) -> str:
    """
    Extract the readable text of a job posting page.

    Drops scripts, styles and navigation chrome, prefers the main content
    element when the page marks one, and collapses all whitespace runs to a
    single space.

    Args:
        html: Raw page HTML

    Returns:
        Plain text (empty if the page has none)
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    main = soup.select_one(MAIN_CONTENT_SELECTOR) or soup.body or soup
    return _WHITESPACE.sub(" ", main.get_text(" ")).strip()


def fetch_job_description(url: str, session: requests.Session = None) -> str:
    """
    Download a job posting and return its main text.

    Args:
        url: http(s) URL of the posting
        session: Optional requests session (default: a one-off request)

    Returns:
        Job description text

    Raises:
        JobFetchError: If the URL is not http(s), the request fails, or the
            page has no readable text
    """
    if urlparse(url).scheme not in ("http", "https"):
        raise JobFetchError(url, "URL must start with http:// or https://")

    _log_info(f"Fetching job description from {url}")
    http = session or requests
    try:
        response = http.get(url, timeout=JOB_FETCH_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise JobFetchError(url, str(e)) from e

    text = html_to_job_text(response.text)
    if not text:
        raise JobFetchError(url, "page has no readable text")

    _log_debug(f"Job description from {url}: {len(text)} characters")
    return text
