import pytest

from gintonic.path import clean_path

CLEAN_TESTS = [
    # Already clean
    ("/", "/"),
    ("/abc", "/abc"),
    ("/a/b/c", "/a/b/c"),
    ("/abc/", "/abc/"),
    ("/a/b/c/", "/a/b/c/"),
    # missing root
    ("", "/"),
    ("a/", "/a/"),
    ("abc", "/abc"),
    ("abc/def", "/abc/def"),
    ("a/b/c", "/a/b/c"),
    # Remove doubled slash
    ("//", "/"),
    ("/abc//", "/abc/"),
    ("/abc/def//", "/abc/def/"),
    ("/a/b/c//", "/a/b/c/"),
    ("/abc//def//ghi", "/abc/def/ghi"),
    ("//abc", "/abc"),
    ("///abc", "/abc"),
    ("//abc//", "/abc/"),
    # Remove . elements
    (".", "/"),
    ("./", "/"),
    ("/abc/./def", "/abc/def"),
    ("/./abc/def", "/abc/def"),
    ("/abc/.", "/abc/"),
    # Remove .. elements
    ("..", "/"),
    ("../", "/"),
    ("../../", "/"),
    ("../..", "/"),
    ("../../abc", "/abc"),
    ("/abc/def/ghi/../jkl", "/abc/def/jkl"),
    ("/abc/def/../ghi/../jkl", "/abc/jkl"),
    ("/abc/def/..", "/abc"),
    ("/abc/def/../..", "/"),
    ("/abc/def/../../..", "/"),
    ("/abc/def/../../../ghi/jkl/../../../mno", "/mno"),
    # Combinations
    ("abc/./../def", "/def"),
    ("abc//./../def", "/def"),
    ("abc/../../././../def", "/def"),
]


@pytest.mark.parametrize("path,result", CLEAN_TESTS)
def test_clean_path(path, result):
    assert clean_path(path) == result
    assert clean_path(result) == result


def _long_paths():
    for i in range(1, 1235):
        ss = "a" * i
        correct = "/" + ss
        yield correct, correct
        yield ss, correct
        yield "//" + ss, correct
        yield "/" + ss + "/b/..", correct


def test_clean_path_long():
    for path, result in _long_paths():
        assert clean_path(path) == result
        assert clean_path(result) == result