"""Output writer: emit rendered pages and copy assets under the output root"""

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from mdsite.core.errors import WriteError


logger = logging.getLogger(__name__)


def _write_page(output_dir: Path, rel: str, html: str) -> str:
    dest = output_dir / rel
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(html, encoding='utf-8')
    except OSError as e:
        raise WriteError(str(dest), e) from e
    logger.debug("  wrote %s", rel)
    return rel


def _copy_asset(source_root: Path, output_dir: Path, rel: str) -> str:
    dest = output_dir / rel
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_root / rel, dest)
    except OSError as e:
        raise WriteError(str(dest), e) from e
    logger.debug("  copied %s", rel)
    return rel


def write_site(
    pages: dict[str, str],
    assets: list[str],
    source_root: Path,
    output_dir: Path,
    workers: int | None = None,
    ) -> tuple[list[str], list[str]]:
    """Write pages (output path -> html) and copy assets; return the written paths.

    Existing files are overwritten and stale files are left in place. The
    first WriteError cancels writes that have not started and is re-raised;
    files already written stay on disk.
    """
    with ThreadPoolExecutor(max_workers=workers) as pool:
        page_futures = [pool.submit(_write_page, output_dir, rel, html) for rel, html in pages.items()]
        asset_futures = [pool.submit(_copy_asset, source_root, output_dir, rel) for rel in assets]
        try:
            written = [f.result() for f in page_futures]
            copied = [f.result() for f in asset_futures]
        except WriteError:
            for f in page_futures + asset_futures:
                f.cancel()
            raise
    return written, copied
