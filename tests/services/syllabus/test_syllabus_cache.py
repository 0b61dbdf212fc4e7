from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from src.services.syllabus import SyllabusCache, SyllabusLoadError


def _write(tmp_path: Path) -> tuple[Path, Path]:
    prelims = tmp_path / "prelims.md"
    mains = tmp_path / "mains.md"
    prelims.write_text("Prelims syllabus", encoding="utf-8")
    mains.write_text("Mains syllabus", encoding="utf-8")
    return prelims, mains


def test_first_call_reads_both_files(tmp_path: Path):
    prelims, mains = _write(tmp_path)
    cache = SyllabusCache(prelims, mains)

    content = cache.get_syllabus_content()
    assert content.prelims_text == "Prelims syllabus"
    assert content.mains_text == "Mains syllabus"
    assert cache.is_loaded


def test_later_calls_do_not_touch_disk(tmp_path: Path):
    prelims, mains = _write(tmp_path)
    cache = SyllabusCache(prelims, mains)
    first = cache.get_syllabus_content()

    prelims.unlink()
    mains.write_text("changed", encoding="utf-8")

    assert cache.get_syllabus_content() is first


def test_missing_file_raises(tmp_path: Path):
    prelims, _ = _write(tmp_path)
    cache = SyllabusCache(prelims, tmp_path / "missing.md")

    with pytest.raises(SyllabusLoadError) as exc_info:
        cache.get_syllabus_content()
    assert exc_info.value.path == tmp_path / "missing.md"
    assert not cache.is_loaded


def test_concurrent_first_calls_share_one_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    prelims, mains = _write(tmp_path)
    cache = SyllabusCache(prelims, mains)

    reads: list[Path] = []
    original = SyllabusCache._read

    def counting_read(path: Path) -> str:
        reads.append(path)
        return original(path)

    monkeypatch.setattr(SyllabusCache, "_read", staticmethod(counting_read))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.get_syllabus_content(), range(16)))

    assert all(r is results[0] for r in results)
    assert len(reads) == 2
