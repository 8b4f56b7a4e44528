"""Tests for crmsearch.duplicates.scan"""
import copy

import pytest

from crmsearch.duplicates.scan import is_masked, scan_for_duplicates

RECORDS = [
    {"id": "1", "name": "João Silva", "email": "JOAO@x.pt", "nif": "111"},
    {"id": "2", "name": "Joao Silva Lda", "email": " joao@x.pt ", "nif": "222"},
    {"id": "3", "name": "Maria Santos", "email": "maria@x.pt", "nif": "333"},
    {"id": "4", "name": "Maria Santoss", "email": "m2@x.pt", "nif": "333"},
    {"id": "5", "name": "Pedro Costa", "email": "pedro@x.pt", "nif": "555"},
    {"id": "6", "name": "Pedro Kosta", "email": "pk@x.pt", "nif": "666"},
    {"id": "7", "name": "****", "email": "****", "nif": "****"},
    {"id": "8", "name": "****", "email": "****", "nif": "****"},
    {"id": "9", "name": "Ana Ferreira", "email": "", "nif": ""},
]


def group_ids(group):
    return [r["id"] for r in group.records]


class TestIsMasked:
    @pytest.mark.parametrize("value,expected", [
        ("****", True), (" *** ", True), ("a***", False), ("", False), ("joao@x.pt", False),
    ])
    def test_values(self, value, expected):
        assert is_masked(value) is expected


class TestScan:
    def test_detection_order(self):
        scan = scan_for_duplicates(RECORDS)
        assert [(g.match_type, g.match_value, group_ids(g)) for g in scan.groups] == [
            ("email", "joao@x.pt", ["1", "2"]),
            ("nif", "333", ["3", "4"]),
            ("name", "Pedro Costa", ["5", "6"]),
        ]
        assert scan.scanned == 9
        assert scan.total_duplicates == 3

    def test_name_group_records_min_similarity(self):
        scan = scan_for_duplicates(RECORDS)
        name_group = scan.groups[-1]
        # "pedro costa" vs "pedro kosta": one substitution over 11 characters
        assert name_group.similarity == 91
        assert scan.groups[0].similarity is None

    def test_name_threshold(self):
        scan = scan_for_duplicates(RECORDS, name_threshold=95)
        assert [g.match_type for g in scan.groups] == ["email", "nif"]

    def test_accents_ignored_for_names(self):
        records = [{"name": "José Conceição"}, {"name": "Jose Conceicao"}, {"name": "Rui"}]
        scan = scan_for_duplicates(records)
        assert len(scan.groups) == 1
        assert scan.groups[0].similarity == 100

    def test_record_joins_only_one_group(self):
        records = [{"name": "Ana Silva"}, {"name": "Ana Silvas"}, {"name": "Ana Silva"}]
        scan = scan_for_duplicates(records)
        assert len(scan.groups) == 1
        assert len(scan.groups[0].records) == 3
        assert scan.total_duplicates == 2

    def test_empty_and_unmutated(self):
        assert scan_for_duplicates([]).groups == []
        before = copy.deepcopy(RECORDS)
        scan_for_duplicates(RECORDS)
        assert RECORDS == before

    def test_custom_field_paths(self):
        records = [
            {"contact": {"mail": "a@x.pt"}, "company": {"name": "A"}},
            {"contact": {"mail": "A@X.PT"}, "company": {"name": "B"}},
        ]
        scan = scan_for_duplicates(records, email_field="contact.mail", name_field="company.name")
        assert [g.match_type for g in scan.groups] == ["email"]
