import pytest

from retrotiles.loadfile import (
    MAX_PATH,
    AssetLoader,
    FileInfo,
    build_file_path,
    split_filename,
)


def test_default_path_is_current_directory():
    assert AssetLoader().path == "."


def test_trailing_separator_is_removed(tmp_path):
    loader = AssetLoader(str(tmp_path) + "/")
    assert loader.path == str(tmp_path)


def test_single_character_path_is_kept():
    assert AssetLoader("/").path == "/"


def test_path_is_truncated():
    loader = AssetLoader("a" * (MAX_PATH + 50))
    assert len(loader.path) == MAX_PATH - 1


def test_resolve_ends_with_filename(tmp_path):
    loader = AssetLoader(str(tmp_path))
    assert loader.resolve("level.tmx").endswith("level.tmx")
    assert loader.resolve("level.tmx").startswith(str(tmp_path))


def test_read_returns_content(tmp_path):
    (tmp_path / "data.bin").write_bytes(b"\x00\x01payload")
    loader = AssetLoader(str(tmp_path))
    assert loader.read("data.bin") == b"\x00\x01payload"


def test_open_gives_binary_file(tmp_path):
    (tmp_path / "x.txt").write_bytes(b"abc")
    loader = AssetLoader(str(tmp_path))
    with loader.open("x.txt") as handle:
        assert handle.read() == b"abc"


def test_subdirectory_read(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "f.dat").write_bytes(b"zz")
    loader = AssetLoader(str(tmp_path))
    assert loader.read("sub/f.dat") == b"zz"


def test_exists(tmp_path):
    (tmp_path / "here.png").write_bytes(b"")
    loader = AssetLoader(str(tmp_path))
    assert loader.exists("here.png") is True
    assert loader.exists("missing.png") is False


def test_read_missing_raises(tmp_path):
    loader = AssetLoader(str(tmp_path))
    with pytest.raises(FileNotFoundError):
        loader.read("nothing.bin")


def test_path_can_be_changed(tmp_path):
    (tmp_path / "a.bin").write_bytes(b"1")
    loader = AssetLoader()
    loader.path = str(tmp_path)
    assert loader.read("a.bin") == b"1"


def test_split_full():
    assert split_filename("dir/sub/file.png") == FileInfo("dir/sub", "file", "png")


def test_split_name_only():
    assert split_filename("file") == FileInfo("", "file", "")


def test_split_hidden_file():
    assert split_filename(".hidden") == FileInfo("", ".hidden", "")
    assert split_filename("dir/.hidden") == FileInfo("dir", ".hidden", "")


def test_split_backslash():
    assert split_filename("a\\b.c") == FileInfo("a", "b", "c")


def test_split_dot_in_directory():
    assert split_filename("v1.2/readme") == FileInfo("v1.2", "readme", "")


def test_split_then_build_round_trip():
    for name in ("dir/sub/file.png", "file.json", "dir/file", "plain"):
        info = split_filename(name)
        assert build_file_path(info.path, info.name, info.ext) == name


@pytest.mark.parametrize(
    "path,name,ext,expected",
    [
        ("p", "n", "e", "p/n.e"),
        ("p", "n", None, "p/n"),
        ("", "n", "e", "n.e"),
        (None, "n", "", "n"),
    ],
)
def test_build_file_path(path, name, ext, expected):
    assert build_file_path(path, name, ext) == expected