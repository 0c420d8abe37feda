import hashlib
from unittest.mock import patch

import pytest

from adapters.bagit.manifests import (
    file_checksum,
    list_payload_files,
    parse_manifest,
    payload_manifests,
    verify_bag,
)


def test_valid_bag_has_no_problems(make_bag):
    bag = make_bag(algorithms=("sha1", "md5"))

    assert verify_bag(bag) == []
    assert sorted(payload_manifests(bag)) == ["md5", "sha1"]


def test_list_payload_files_is_sorted_and_bag_relative(make_bag):
    bag = make_bag()

    assert list_payload_files(bag) == ["data/file1.txt", "data/sub/file2.txt"]


def test_checksum_mismatch_is_reported(make_bag):
    bag = make_bag()
    (bag / "data" / "file1.txt").write_bytes(b"tampered")

    assert verify_bag(bag) == ["manifest-sha1.txt: checksum mismatch for data/file1.txt"]


def test_unlisted_and_missing_payload_files_are_reported(make_bag):
    bag = make_bag()
    (bag / "data" / "extra.txt").write_bytes(b"extra")
    (bag / "data" / "sub" / "file2.txt").unlink()

    problems = verify_bag(bag)

    assert "manifest-sha1.txt: file data/sub/file2.txt does not exist" in problems
    assert "manifest-sha1.txt: payload file data/extra.txt is not listed" in problems


def test_missing_declaration_and_manifest(make_bag):
    bag = make_bag(omit=("bagit.txt",))
    assert verify_bag(bag) == ["Mandatory file bagit.txt not found"]

    bag = make_bag(algorithms=())
    assert verify_bag(bag) == ["No payload manifest found"]


def test_incomplete_declaration(make_bag):
    bag = make_bag()
    (bag / "bagit.txt").write_text("BagIt-Version: 1.0\n", encoding="utf-8")

    assert verify_bag(bag) == ["bagit.txt does not declare Tag-File-Character-Encoding"]


def test_malformed_manifest_line_is_a_problem_not_an_error(make_bag):
    bag = make_bag()
    with (bag / "manifest-sha1.txt").open("a", encoding="utf-8") as handle:
        handle.write("onlyonefield\n")

    problems = verify_bag(bag)

    assert len(problems) == 1
    assert "malformed manifest line" in problems[0]


def test_unsupported_algorithm(make_bag):
    bag = make_bag()
    (bag / "manifest-crc32.txt").write_text("", encoding="utf-8")

    assert verify_bag(bag) == ["manifest-crc32.txt: unsupported checksum algorithm 'crc32'"]


def test_parse_manifest_decodes_percent_escapes(tmp_path):
    manifest = tmp_path / "manifest-md5.txt"
    manifest.write_text("ABC  data/100%25 done.txt\n\n", encoding="utf-8")

    assert parse_manifest(manifest) == {"data/100% done.txt": "abc"}


def test_file_checksum(tmp_path):
    target = tmp_path / "f"
    target.write_bytes(b"hello")

    assert file_checksum(target, "md5") == "5d41402abc4b2a76b9719d911017c592"


@pytest.mark.parametrize("entry", ["../secret.txt", "data/../../secret.txt", "{absolute}"])
def test_manifest_paths_outside_the_bag_are_never_read(make_bag, tmp_path, entry):
    secret = tmp_path / "secret.txt"
    secret.write_bytes(b"not part of the bag")
    bag = make_bag()
    rel_path = entry.format(absolute=secret.as_posix())
    digest = hashlib.sha1(secret.read_bytes()).hexdigest()
    with (bag / "manifest-sha1.txt").open("a", encoding="utf-8") as handle:
        handle.write(f"{digest}  {rel_path}\n")

    with patch("adapters.bagit.manifests.file_checksum", wraps=file_checksum) as checksum:
        problems = verify_bag(bag)

    assert problems == [f"manifest-sha1.txt: path outside the bag: {rel_path}"]
    assert secret.resolve() not in {call.args[0] for call in checksum.call_args_list}


def test_symlink_leading_out_of_the_bag_is_outside(make_bag, tmp_path):
    secret = tmp_path / "secret.txt"
    secret.write_bytes(b"not part of the bag")
    bag = make_bag()
    (bag / "data" / "link.txt").symlink_to(secret)
    with (bag / "manifest-sha1.txt").open("a", encoding="utf-8") as handle:
        handle.write(f"{hashlib.sha1(secret.read_bytes()).hexdigest()}  data/link.txt\n")

    assert verify_bag(bag) == ["manifest-sha1.txt: path outside the bag: data/link.txt"]


def test_bagit_txt_that_is_not_utf8_is_a_problem(make_bag):
    bag = make_bag()
    (bag / "bagit.txt").write_bytes(b"BagIt-Version: 1.0\nTag-File-Character-Encoding: \xff\xfe\n")

    assert verify_bag(bag) == ["bagit.txt is not valid UTF-8"]


def test_manifest_that_is_not_utf8_is_a_problem(make_bag):
    bag = make_bag()
    with (bag / "manifest-sha1.txt").open("ab") as handle:
        handle.write(b"abc  data/\xff.txt\n")

    assert verify_bag(bag) == ["manifest-sha1.txt is not valid UTF-8"]
