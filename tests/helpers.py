"""
Test helpers: fake HTTP responses and archive builders.
"""

import io
import json
import zipfile
from typing import Dict, List, Union


RELEASE_API = "https://api.example.test/repos/jeremylong/DependencyCheck/releases"
ZIP_URL = "https://downloads.example.test/v9.0.9/dependency-check-9.0.9-release.zip"

LAUNCHER_SCRIPT = """#!/bin/sh
HERE="$(cd "$(dirname "$0")/.." && pwd)"
echo "$*" >> "$HERE/invocations.txt"
echo "JAVA_OPTS=$JAVA_OPTS" >> "$HERE/invocations.txt"
echo "Dependency-Check Core version 9.0.9"
exit 0
"""


class FakeUrlopen:
    """urlopen replacement returning queued bodies or raising queued errors."""

    def __init__(self, responses: List[Union[bytes, BaseException]]):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return io.BytesIO(item)

    @property
    def urls(self) -> List[str]:
        return [r.full_url for r in self.requests]


def build_zip(files: Dict[str, str], executables=()) -> bytes:
    """Build an in-memory ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o755 if name in executables else 0o644) << 16
            zf.writestr(info, content)
    return buffer.getvalue()


def release_json(assets) -> bytes:
    return json.dumps({"tag_name": "v9.0.9", "assets": assets}).encode()


