from bag_validation.rules_engine.models import OutcomeStatus
from bag_validation.rules_engine.rules import (
    FilesXmlFilePathAttributesContainLocalBagPath,
    FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed,
    OptionalBagFileIsUtf8Decodable,
    OptionalOriginalFilePathsIsComplete,
)


def test_file_paths_point_into_payload(make_bag, make_files_xml):
    rule = FilesXmlFilePathAttributesContainLocalBagPath()

    assert rule.evaluate(make_bag()).status == OutcomeStatus.PASSED
    bag = make_bag(files_xml=make_files_xml(["data/file1.txt", "metadata/dataset.xml", "data/../bagit.txt", "data/gone.txt"]))
    assert rule.evaluate(bag).messages == [
        "files.xml: filepath attribute is not a payload path: 'metadata/dataset.xml'",
        "files.xml: filepath attribute is not a payload path: 'data/../bagit.txt'",
        "files.xml: filepath attribute points to a file that is not in the bag: 'data/gone.txt'",
    ]


def test_file_paths_follow_original_filepaths_mapping(make_bag, make_files_xml):
    bag = make_bag(
        payload={"data/1": b"one"},
        files_xml=make_files_xml(["data/my file.txt"]),
        extra_files={"original-filepaths.txt": "data/1  data/my file.txt\n"},
    )

    assert FilesXmlFilePathAttributesContainLocalBagPath().evaluate(bag).status == OutcomeStatus.PASSED
    assert FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed().evaluate(bag).status == OutcomeStatus.PASSED
    assert OptionalOriginalFilePathsIsComplete().evaluate(bag).status == OutcomeStatus.PASSED


def test_duplicates_and_undescribed_payload(make_bag, make_files_xml):
    bag = make_bag(files_xml=make_files_xml(["data/file1.txt", "data/file1.txt"]))

    outcome = FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed().evaluate(bag)

    assert outcome.messages == [
        "files.xml: duplicate entries found: data/file1.txt",
        "files.xml: payload files not described: data/sub/file2.txt",
    ]


def test_optional_file_utf8(make_bag):
    rule = OptionalBagFileIsUtf8Decodable("original-filepaths.txt")

    assert rule.evaluate(make_bag()).status == OutcomeStatus.INAPPLICABLE
    assert rule.evaluate(make_bag(extra_files={"original-filepaths.txt": "data/1  data/é\n"})).status == OutcomeStatus.PASSED
    outcome = rule.evaluate(make_bag(extra_files={"original-filepaths.txt": b"data/1  data/\xff\n"}))
    assert outcome.status == OutcomeStatus.FAILED
    assert outcome.messages[0].startswith("Input not valid UTF-8: original-filepaths.txt")


def test_original_filepaths_inapplicable_without_file(make_bag):
    assert OptionalOriginalFilePathsIsComplete().evaluate(make_bag()).status == OutcomeStatus.INAPPLICABLE


def test_original_filepaths_incomplete(make_bag, make_files_xml):
    bag = make_bag(
        payload={"data/1": b"one", "data/2": b"two"},
        files_xml=make_files_xml(["data/a.txt", "data/2"]),
        extra_files={"original-filepaths.txt": "data/1  data/a.txt\ndata/9  data/z.txt\n"},
    )

    outcome = OptionalOriginalFilePathsIsComplete().evaluate(bag)

    assert outcome.messages == [
        "original-filepaths.txt: payload files without a mapping: data/2",
        "original-filepaths.txt: mapped files not found in payload: data/9",
        "original-filepaths.txt: original paths not described in files.xml: data/z.txt",
    ]


def test_malformed_original_filepaths_is_a_violation(make_bag):
    bag = make_bag(extra_files={"original-filepaths.txt": "no-separator\n"})

    assert OptionalOriginalFilePathsIsComplete().evaluate(bag).status == OutcomeStatus.FAILED
    # files.xml rules fall back to the physical paths.
    assert FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed().evaluate(bag).status == OutcomeStatus.PASSED
