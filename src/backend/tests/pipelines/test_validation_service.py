import json

import pytest
import yaml

from bag_validation.rules_engine.catalog import RuleCatalog
from bag_validation.rules_engine.runner import RulesRunner
from pipelines.validation import (
    BagNotFoundError,
    BagValidationService,
    InformationPackageType,
    ValidateCommand,
    render_json,
    render_text,
    render_yaml,
)


def test_validate_dir_reports_compliant_bag(make_service, make_bag):
    bag = make_bag(name="my-bag")

    report = make_service(profile_version="1.1.0").validate_dir(bag, package_type=InformationPackageType.MIGRATION)

    assert report.is_compliant is True
    assert report.name == "my-bag"
    assert report.bag_location == str(bag)
    assert report.profile_version == "1.1.0"
    assert report.information_package_type == InformationPackageType.MIGRATION
    assert report.rule_violations == []


def test_validate_dir_reports_violations(make_service, make_bag):
    bag = make_bag(bag_info="Is-Version-Of: not-a-urn\n")

    report = make_service().validate_dir(bag)

    assert report.is_compliant is False
    assert [(v.rule, v.violation) for v in report.rule_violations] == [
        ("1.2.3(b)", "bag-info.txt Is-Version-Of value must be a valid URN: not-a-urn")
    ]


def test_missing_bag_is_not_found(make_service, tmp_path):
    with pytest.raises(BagNotFoundError):
        make_service().validate_dir(tmp_path / "nope")


def test_base_folder_resolves_and_confines_paths(make_service, make_bag, tmp_path):
    make_bag(name="inside")
    service = make_service(base_folder=tmp_path)

    report = service.validate_dir(tmp_path.joinpath("inside").relative_to(tmp_path), bag_location="inside")

    assert report.name == "inside"
    assert report.bag_location == "inside"
    with pytest.raises(BagNotFoundError):
        service.validate_dir(tmp_path.parent)
    with pytest.raises(BagNotFoundError):
        service.validate_dir(tmp_path / ".." / "elsewhere")


def test_validate_zip(make_service, make_bag, zip_bag):
    data = zip_bag(make_bag(name="zipped"))

    report = make_service().validate_zip(data)

    assert report.is_compliant is True
    assert report.name == "zipped"
    assert report.bag_location is None


@pytest.mark.parametrize("data", [b"not a zip", b""])
def test_validate_zip_rejects_garbage(make_service, data):
    with pytest.raises(BagNotFoundError):
        make_service().validate_zip(data)


def test_validate_zip_without_bag_directory(make_service, tmp_path):
    import io
    import zipfile

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("bagit.txt", "BagIt-Version: 1.0\n")

    with pytest.raises(BagNotFoundError, match="No bag directory"):
        make_service().validate_zip(buffer.getvalue())


def test_validate_command_accepts_wire_names():
    command = ValidateCommand.model_validate({"bagLocation": "/bags/x", "packageType": "MIGRATION"})

    assert command.bag_location == "/bags/x"
    assert command.package_type == InformationPackageType.MIGRATION
    assert ValidateCommand.model_validate({"bagLocation": "y"}).package_type == InformationPackageType.DEPOSIT


def test_renderers_use_wire_names(make_service, make_bag):
    report = make_service().validate_dir(make_bag(bag_info="Is-Version-Of: x\n"))

    as_json = json.loads(render_json(report))
    as_yaml = yaml.safe_load(render_yaml(report))
    text = render_text(report)

    assert as_json == as_yaml
    assert as_json["isCompliant"] is False
    assert as_json["informationPackageType"] == "DEPOSIT"
    assert as_json["ruleViolations"][0]["rule"] == "1.2.3(b)"
    assert "Compliant: no" in text
    assert "  - [1.2.3(b)] " in text


def test_validate_zip_refuses_archives_above_the_size_limit(make_bag, zip_bag):
    data = zip_bag(make_bag(name="zipped"))
    service = BagValidationService(RulesRunner(RuleCatalog(())), max_zip_size=len(data) - 1)

    with pytest.raises(BagNotFoundError, match="exceeds the limit"):
        service.validate_zip(data)


def test_bag_with_undecodable_bagit_txt_gets_a_report(make_service, make_bag):
    bag = make_bag()
    (bag / "bagit.txt").write_bytes(b"BagIt-Version: 1.0\nTag-File-Character-Encoding: \xff\n")

    report = make_service().validate_dir(bag)

    assert report.is_compliant is False
    assert [(v.rule, v.violation) for v in report.rule_violations] == [
        ("1.1.1", "Bag is not valid: bagit.txt is not valid UTF-8")
    ]
