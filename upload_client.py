import asyncio
import json
import sys

import httpx

MIME_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".m4a": "audio/mp4",
}


async def upload(path, url="http://localhost:3000/api/transcribe"):
    ext = path[path.rfind("."):].lower()
    mime = MIME_TYPES.get(ext, "application/octet-stream")

    with open(path, "rb") as f:
        files = {"audio": (path.rsplit("/", 1)[-1], f, mime)}
        print(f"Uploading {path} as {mime}...")
        async with httpx.AsyncClient(timeout=300) as client:
            resp = await client.post(url, files=files)

    print(f"HTTP {resp.status_code}")
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python upload_client.py <audio-file> [url]")
        sys.exit(1)
    asyncio.run(upload(*sys.argv[1:3]))
