#!/usr/bin/env python3
"""
Basic satis publisher usage example.

Publishes a small satis build tree to an in-memory mock server, so it runs
without any network access.
Run with: python examples/basic_usage.py
"""

import json
import tempfile
from pathlib import Path

from satis_publisher import AccessPolicy, RepositoryPublisher, UploadRejectedError
from satis_publisher.testing import MockRepositoryServer

print("=== Satis Publisher Basic Usage Example ===\n")

# 1. Access policy checks
print("1. Testing access policy...")
policy = AccessPolicy().set_need_authentication(False)

for path in ["packages.json", "dist/vendor-name-1.0.zip", "include\\all.json",
             "index.php", "anywhere/packages.json", "../../packages.json"]:
    print(f"   {path!r:32} allowed={policy.is_allowed(path)}")

print("\n   Policy document:")
for line in policy.dump().splitlines():
    print(f"   {line}")

print("\n   OK: Access policy working\n")

# 2. Publish a build directory
print("2. Publishing a build directory...")

with tempfile.TemporaryDirectory() as tmp:
    build = Path(tmp) / "build"
    (build / "include").mkdir(parents=True)
    (build / "dist").mkdir()
    (build / "packages.json").write_text(json.dumps({"packages": []}))
    (build / "include" / "all.json").write_text(json.dumps({"packages": {}}))
    (build / "dist" / "vendor-name-1.0.zip").write_bytes(b"zipped")
    (build / "index.html").write_text("<html></html>")

    server = MockRepositoryServer()
    server.queue(201).queue(201).queue(201)

    with RepositoryPublisher(
        "http://localhost:54715/repo", policy=policy, transport=server.transport
    ) as publisher:
        publisher.put_dir(build)
        print(f"   Last status: {publisher.status()}")

    for call in server.get_calls("PUT"):
        print(f"   PUT {call.path} ({len(call.content)} bytes)")

    assert server.call_count("PUT") == 3, "index.html must not be uploaded"

print("\n   OK: Directory published\n")

# 3. Refused uploads
print("3. Testing refused upload...")
try:
    RepositoryPublisher("http://localhost:54715", policy=policy).put_file("index.php")
except UploadRejectedError as e:
    print(f"   Caught UploadRejectedError: {e}")
    print(f"   Code: {e.code}, Path: {e.path}")

print("\n   OK: Refused upload raised\n")
