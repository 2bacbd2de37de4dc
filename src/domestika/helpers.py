import json
from pathlib import Path
from typing import Any

import aiofiles


def read_json(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as file:
        return json.load(file)


async def write_json(path: str | Path, data: Any) -> None:
    async with aiofiles.open(path, "w", encoding="utf-8") as file:
        await file.write(json.dumps(data, indent=4, ensure_ascii=False))
