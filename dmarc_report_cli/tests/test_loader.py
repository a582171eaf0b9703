import logging

import pytest

from dmarc_report_cli.loader import load_reports, report_sort_key
from dmarc_report_cli.logging import configure_logging
from dmarc_report_cli.tests.sample_reports import (
    SampleRecord,
    create_corrupt_gzip_report,
    create_corrupt_zip_report,
    create_gzip_report,
    create_latin1_report_xml,
    create_report_xml,
    report_filename,
    two_record_scenario,
    write_report,
)


@pytest.mark.parametrize(
    "filename,key",
    [
        ("google.com!example.com!1607299200!1607385599.xml", 1607299200),
        ("google.com!example.com!42", 42),
        ("google.com!example.com!begin!end.xml", 0),
        ("google.com!example.com", 0),
        ("report.xml", 0),
    ],
)
def test_report_sort_key(filename, key):
    assert report_sort_key(filename) == key


def test_loads_reports_ordered_by_embedded_timestamp(tmp_path):
    for org_name, begin in (("b.org", 300), ("a.org", 200), ("c.org", 100)):
        write_report(
            tmp_path,
            report_filename(org_name=org_name, begin=begin),
            create_report_xml(org_name=org_name, begin=begin),
        )
    write_report(tmp_path, "unnumbered.xml", create_report_xml(org_name="z.org"))

    result = load_reports(tmp_path)

    assert [report.org for report in result.reports] == [
        "z.org",
        "c.org",
        "a.org",
        "b.org",
    ]
    assert result.skipped == []


def test_skips_corrupt_file_and_keeps_valid_ones(tmp_path):
    write_report(tmp_path, "corrupt.xml", "<feedback><report_metadata>")
    write_report(
        tmp_path,
        report_filename(),
        create_report_xml(records=two_record_scenario()),
    )

    result = load_reports(tmp_path)

    assert len(result.reports) == 1
    assert result.skipped == ["corrupt.xml"]


@pytest.mark.parametrize(
    "content",
    [
        "",
        "not xml at all",
        create_report_xml().replace("<org_name>google.com</org_name>", ""),
        create_report_xml(records=[SampleRecord(count=-1)]),
        create_report_xml().replace("<source_ip>1.1.1.1</source_ip>", ""),
    ],
)
def test_skips_file_failing_extraction(tmp_path, content):
    write_report(tmp_path, "bad.xml", content)
    result = load_reports(tmp_path)
    assert result.reports == []
    assert result.skipped == ["bad.xml"]


def test_skips_undecodable_and_broken_archives(tmp_path):
    (tmp_path / "binary.xml").write_bytes(b"\xff\xfe\x00garbage")
    (tmp_path / "broken.xml.gz").write_bytes(b"not gzip")
    (tmp_path / "broken.zip").write_bytes(b"not zip")
    (tmp_path / "good.xml.gz").write_bytes(create_gzip_report(create_report_xml()))

    result = load_reports(tmp_path)

    assert len(result.reports) == 1
    assert sorted(result.skipped) == ["binary.xml", "broken.xml.gz", "broken.zip"]


def test_skips_archives_with_corrupt_compressed_data(tmp_path):
    xml = create_report_xml()
    (tmp_path / "damaged.xml.gz").write_bytes(create_corrupt_gzip_report(xml))
    (tmp_path / "damaged.zip").write_bytes(create_corrupt_zip_report(xml))
    (tmp_path / "good.xml.gz").write_bytes(create_gzip_report(xml))

    result = load_reports(tmp_path)

    assert len(result.reports) == 1
    assert sorted(result.skipped) == ["damaged.xml.gz", "damaged.zip"]


def test_honours_xml_encoding_declaration(tmp_path):
    (tmp_path / "latin1.xml").write_bytes(create_latin1_report_xml())

    result = load_reports(tmp_path)

    assert result.skipped == []
    assert [report.org for report in result.reports] == ["Société Générale"]


def test_domain_filter_drops_reports_without_skipping(tmp_path):
    write_report(
        tmp_path,
        report_filename(domain="Example.com"),
        create_report_xml(domain="Example.com"),
    )
    write_report(
        tmp_path,
        report_filename(domain="other.com"),
        create_report_xml(domain="other.com"),
    )

    result = load_reports(tmp_path, domain_filter="example.COM")

    assert [report.policy.domain for report in result.reports] == ["Example.com"]
    assert result.skipped == []


def test_empty_directory_yields_no_reports(tmp_path):
    result = load_reports(tmp_path)
    assert result.reports == []
    assert result.skipped == []


def test_logs_warning_naming_skipped_file(tmp_path, caplog, reset_logging):
    configure_logging({}, debug=False, color=False)
    logging.getLogger().addHandler(caplog.handler)
    write_report(tmp_path, "corrupt.xml", "<feedback>")

    load_reports(tmp_path)

    warnings = [
        record for record in caplog.records if record.levelno == logging.WARNING
    ]
    assert len(warnings) == 1
    assert "corrupt.xml" in warnings[0].getMessage()
