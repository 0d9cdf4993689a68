"""Chunked upload — feed a local file to the server in tus-style chunks.

Every chunk re-reads and re-writes the whole remote object, so keep chunks
large and files moderate.

Usage:
    python examples/chunked_upload.py https://dav.example.com/dav me secret ./big.iso uploads/big.iso
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from dav_store import DriverConfig, TusDriverWebDAV

CHUNK_SIZE = 4 * 1024 * 1024


async def upload(config: DriverConfig, source: Path, target: str) -> None:
    async with TusDriverWebDAV(config, serialize_chunks=True) as driver:
        print(f"Extensions: {', '.join(driver.tus_extensions)}")
        context = await driver.create_chunked_upload(target, {"source": str(source)})
        offset = 0
        try:
            with source.open("rb") as f:
                while chunk := f.read(CHUNK_SIZE):
                    offset = await driver.write_chunk(target, chunk, offset, context)
                    print(f"  {offset} bytes uploaded")
        except BaseException:
            await driver.delete_chunked_upload(target, context)
            raise
        await driver.finish_chunked_upload(target, context)
        print(f"Done: {(await driver.stat(target)).size} bytes at {target}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("base_url")
    parser.add_argument("username")
    parser.add_argument("password")
    parser.add_argument("source", type=Path)
    parser.add_argument("target")
    parser.add_argument("--root", default="/")
    args = parser.parse_args()
    cfg = DriverConfig(base_url=args.base_url, username=args.username, password=args.password, root=args.root)
    asyncio.run(upload(cfg, args.source, args.target))
