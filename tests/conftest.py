"""Shared fixtures for schema_scraper tests."""

from __future__ import annotations

import pytest

from schema_scraper.filters import default_filters
from schema_scraper.scopes import parse_document

REPORT_HTML = """
<html>
  <head><title>Quarterly</title></head>
  <body>
    <h1>Report</h1>
    <ul class="tags">
      <li class="tag">a</li>
      <li class="tag">b</li>
      <li class="tag">c</li>
    </ul>
    <a class="more primary" href="/next" style="color: red; font-weight: bold">Next</a>
  </body>
</html>
"""

LISTING_HTML = """
<html><body>
  <table>
    <tr data-object-name="entry">
      <td class="title"><h3>Alien</h3></td>
      <td class="year">1979</td>
      <td class="rating"><span class="rating"> 4.5 </span></td>
    </tr>
    <tr data-object-name="entry">
      <td class="title"><h3>Heat</h3></td>
      <td class="year">1995</td>
      <td class="rating"><span class="rating"> 4 </span></td>
    </tr>
  </table>
  <div class="content">
    <p>Keep</p>
    <p>   </p>
    <script>track()</script>
    <br>
  </div>
</body></html>
"""


@pytest.fixture
def report_doc():
    return parse_document(REPORT_HTML)


@pytest.fixture
def listing_doc():
    return parse_document(LISTING_HTML)


@pytest.fixture
def filters():
    return default_filters()


@pytest.fixture
def report_html():
    return REPORT_HTML
