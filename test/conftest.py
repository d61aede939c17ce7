"""Pytest configuration and fixtures

Provides shared fixtures for all tests: a local HTML fixture server that
stands in for the activity site, the listing page fixture, and resets of
the module-level fetcher and extractor.
"""

import sys
import time
from pathlib import Path

import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cdyouth_mcp.scraping import reset_fetcher

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "html"
LISTING_PATH = "jgc/index.html"


# ============================================================================
# HTML FIXTURE SERVER FOR TESTING
# ============================================================================


class HTMLFixtureServer:
    """Simple HTTP server for serving HTML test fixtures.

    Serves files from test/fixtures/html. Two extra paths exist for error
    handling tests:
    - /slow: sleeps before answering, for timeout tests
    - /status/<code>: answers with the given HTTP status
    """

    SLOW_SECONDS = 2.0

    def __init__(self, port: int = 0):
        self.port = port
        self._server = None
        self._thread = None
        self.requests = []
        self._fixtures_dir = FIXTURES_DIR

    def start(self):
        """Start the HTTP server in a background thread."""
        import http.server
        import threading

        # Capture state in closure for the nested Handler class
        fixtures_dir = self._fixtures_dir
        requests = self.requests
        slow_seconds = self.SLOW_SECONDS

        class Handler(http.server.SimpleHTTPRequestHandler):
            def __init__(self, *args, directory=None, **kwargs):  # noqa: ARG002
                super().__init__(*args, directory=str(fixtures_dir), **kwargs)  # type: ignore[arg-type]

            def do_GET(self):
                requests.append({"path": self.path, "headers": dict(self.headers)})
                if self.path.startswith("/slow"):
                    time.sleep(slow_seconds)
                    self._send_text(200, "<html><body>slow</body></html>")
                    return
                if self.path.startswith("/status/"):
                    self._send_text(int(self.path.rsplit("/", 1)[-1]), "error")
                    return
                super().do_GET()

            def _send_text(self, status, body):
                data = body.encode("utf-8")
                try:
                    self.send_response(status)
                    self.send_header("Content-Type", "text/html; charset=utf-8")
                    self.send_header("Content-Length", str(len(data)))
                    self.end_headers()
                    self.wfile.write(data)
                except (BrokenPipeError, ConnectionResetError):
                    # Client gave up (timeout tests)
                    pass

            def log_message(self, format, *args):  # noqa: A002, ARG002
                # Keep output deterministic and avoid noisy logs.
                pass

        class ReusableHTTPServer(http.server.ThreadingHTTPServer):
            allow_reuse_address = True
            daemon_threads = True

        self._server = ReusableHTTPServer(("127.0.0.1", self.port), Handler)
        self.port = int(self._server.server_port)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        """Stop the HTTP server."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    def get_url(self, path: str = "") -> str:
        """Get the full URL for a fixture path."""
        path = path.lstrip("/")
        return f"http://127.0.0.1:{self.port}/{path}"

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    @property
    def listing_url(self) -> str:
        return self.get_url(LISTING_PATH)


@pytest.fixture(scope="function")
def html_fixture_server():
    """
    Provide a lightweight HTTP server for serving HTML test fixtures.

    Binds an ephemeral port on 127.0.0.1. Use html_fixture_server.listing_url
    for the activity listing page.

    Usage:
        async def test_fetch(html_fixture_server):
            fetcher = HTTPFetcher(url=html_fixture_server.listing_url)
    """
    server = HTMLFixtureServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture(scope="session")
def listing_html() -> str:
    """The listing page fixture with ten activities."""
    return (FIXTURES_DIR / LISTING_PATH).read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def reset_scraping_globals():
    """Reset the module-level fetcher before and after each test."""
    reset_fetcher()
    yield
    reset_fetcher()
