"""Async file helpers shared by the artifact writers.

All file-system access in the build goes through ``anyio.Path`` so the
writers stay awaitable. Writes replace the target in one step: content
lands in a sibling temp file first, then ``replace()`` swaps it in.
"""

import os

import anyio


async def read_text_if_exists(path: os.PathLike[str] | str) -> str | None:
    """Return the file's text, or ``None`` when it does not exist."""
    target = anyio.Path(path)
    if not await target.exists():
        return None
    return await target.read_text(encoding="utf-8")


async def write_text_atomic(path: os.PathLike[str] | str, content: str) -> None:
    """Write ``content`` to ``path``, replacing any previous file whole."""
    target = anyio.Path(path)
    await target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    try:
        await tmp.write_text(content, encoding="utf-8")
        await tmp.replace(target)
    finally:
        if await tmp.exists():
            await tmp.unlink()


async def list_files(root: os.PathLike[str] | str) -> list[str]:
    """Every regular file below ``root`` as a POSIX path relative to it.

    Dotfiles are included. A missing ``root`` yields an empty list.
    """
    base = anyio.Path(root)
    if not await base.is_dir():
        return []
    files: list[str] = []
    async for entry in base.rglob("*"):
        if await entry.is_file():
            files.append(entry.relative_to(base).as_posix())
    return sorted(files)
