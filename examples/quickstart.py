"""Quickstart — write, stat, ranged read and list with dav-store.

Demonstrates:
- Building a driver through the registry from host-style options
- Writing and reading a file under a root prefix
- Reading a byte range

Usage:
    python examples/quickstart.py https://dav.example.com/remote.php/dav/files/me me secret
"""

from __future__ import annotations

import argparse
import asyncio

from dav_store import create_driver


async def main(base_url: str, username: str, password: str) -> None:
    options = {"baseUrl": base_url, "username": username, "password": password, "root": "/"}
    async with create_driver("webdav", options) as driver:
        await driver.write("hello.txt", b"Hello, world!")
        print(f"File exists: {await driver.exists('hello.txt')}")

        stat = await driver.stat("hello.txt")
        print(f"Size: {stat.size} bytes, modified {stat.modified:%Y-%m-%d %H:%M}")

        # Only "world" comes over the wire
        stream = await driver.read("hello.txt", {"range": {"start": 7, "end": 11}})
        print(f"Range: {b''.join([chunk async for chunk in stream])!r}")

        print("Files:")
        async for path in driver.list(""):
            print(f"  {path}")

        await driver.delete("hello.txt")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("base_url")
    parser.add_argument("username")
    parser.add_argument("password")
    args = parser.parse_args()
    asyncio.run(main(args.base_url, args.username, args.password))
