"""Serve the generated static site locally for preview."""

import http.server
import os
import socketserver
import webbrowser
from pathlib import Path


class Handler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        # Suppress default per-request logging; print a cleaner version
        print(f"  {self.command} {self.path}")


class _Server(socketserver.TCPServer):
    allow_reuse_address = True


def serve(output_dir: Path, port: int, open_browser: bool = False) -> bool:
    """Serve output_dir until interrupted. Returns False if there is nothing to serve."""
    if not output_dir.exists() or not any(output_dir.iterdir()):
        print(f"'{output_dir}' is empty or missing. Run 'sc build' first.")
        return False

    os.chdir(output_dir)

    url = f"http://localhost:{port}"
    print(f"Serving '{output_dir}/' at {url}")
    print("Press Ctrl+C to stop.\n")
    if open_browser:
        webbrowser.open(url)

    with _Server(("", port), Handler) as httpd:
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
    return True
