import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple, Union

import requests
from retrying import retry

from models.post import WARNING, LintIssue, Post

URL_PATTERN = re.compile(r"""https?://(?:[^\s<>'"()\[\]{}]|\([^\s<>'"()]*\))+""")


def extract_links(text: str) -> List[str]:
    """
    Unique http(s) links in order of first appearance.
    """
    links = []
    for url in URL_PATTERN.findall(text or ""):
        # Clean trailing punctuation
        url = url.rstrip(".,;:!?")
        if url not in links:
            links.append(url)
    return links


def _is_transient(exc: Exception) -> bool:
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


class LinkChecker:
    def __init__(self, timeout: float = 10, workers: int = 8):
        self.timeout = timeout
        self.workers = workers
        self.headers = {
            "User-Agent": "Mozilla/5.0 (compatible; postlint link checker)"
        }

    @retry(stop_max_attempt_number=3, wait_fixed=200, retry_on_exception=_is_transient)
    def _request(self, method: str, url: str) -> requests.Response:
        return requests.request(
            method, url, headers=self.headers, timeout=self.timeout, allow_redirects=True
        )

    def check(self, url: str) -> Tuple[str, Union[int, str]]:
        try:
            # Try HEAD first for speed
            response = self._request("HEAD", url)
            if response.status_code >= 400:
                # Fallback to GET for sites that block HEAD
                response = self._request("GET", url)
            return url, response.status_code
        except requests.RequestException as e:
            return url, str(e)

    def check_posts(self, posts: List[Post]) -> List[LintIssue]:
        links = {post.path: extract_links(post.body) for post in posts}
        urls = sorted({url for found in links.values() for url in found})
        if not urls:
            return []

        with ThreadPoolExecutor(max_workers=int(self.workers)) as executor:
            results = dict(executor.map(self.check, urls))

        issues = []
        for post in posts:
            for url in links[post.path]:
                status = results[url]
                if not isinstance(status, int) or status >= 400:
                    issues.append(
                        LintIssue(post.path, "link", f"unreachable link {url} ({status})", WARNING)
                    )
        return issues
