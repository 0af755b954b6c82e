from __future__ import annotations

import pytest

from gis_boundary_loader.mappings.common import (FieldSpec, MappingConfigError,
                                                 as_text, first_present,
                                                 load_field_mappings,
                                                 parse_field_mappings,
                                                 resolve_field)
from gis_boundary_loader.mappings.countries import map_country
from gis_boundary_loader.mappings.states import map_state, parent_reference
from gis_boundary_loader.models import EntityKind


def test_packaged_mappings_cover_every_column():
    mappings = load_field_mappings()

    assert [s.column for s in mappings[EntityKind.COUNTRY]] == [
        "name", "name_en", "iso_a2", "iso_a3", "iso_n3",
    ]
    assert [s.column for s in mappings[EntityKind.STATE]] == [
        "name", "name_en", "iso_a2", "adm1_code", "admin", "type", "type_en",
    ]


def test_first_present_skips_missing_and_null_values():
    props = {"NAME": None, "name": "Peru"}

    assert first_present(props, ("NAME", "name")) == "Peru"
    assert first_present(props, ("X",), default="d") == "d"
    assert first_present(None, ("NAME",)) is None


def test_empty_string_is_present():
    # Only explicit null_if entries turn empty strings into NULL.
    spec = FieldSpec(column="admin", keys=("admin", "ADMIN"))

    assert resolve_field({"admin": "", "ADMIN": "Peru"}, spec) == ""


def test_as_text_mirrors_json_text_extraction():
    assert as_text("250") == "250"
    assert as_text(250) == "250"
    assert as_text(True) == "true"
    assert as_text({"a": 1}) == '{"a": 1}'
    assert as_text(None) is None


def test_country_mapping_defaults_and_sentinels():
    columns = map_country({"ISO_A2": "-99", "ISO_A3": "NOR", "ISO_N3": 578})

    assert columns == {
        "name": "Unknown",
        "name_en": None,
        "iso_a2": None,
        "iso_a3": "NOR",
        "iso_n3": "578",
    }


def test_country_name_en_prefers_explicit_english_name():
    columns = map_country({"NAME": "Côte d'Ivoire", "name_en": "Ivory Coast"})

    assert columns["name_en"] == "Ivory Coast"


def test_state_mapping_priority_order():
    columns = map_state(
        {
            "name": "Bayern",
            "NAME": "BAYERN",
            "name_en": "Bavaria",
            "iso_a2": "DE",
            "adm1_code": "DEU-1591",
            "code_local": "DE.BY",
            "admin": "Germany",
            "type": "Land",
            "type_en": "State",
        }
    )

    assert columns == {
        "name": "Bayern",
        "name_en": "Bavaria",
        "iso_a2": "DE",
        "adm1_code": "DEU-1591",
        "admin": "Germany",
        "type": "Land",
        "type_en": "State",
    }


def test_state_iso_blank_becomes_null():
    assert map_state({"iso_a2": ""})["iso_a2"] is None
    assert map_state({"iso_a2": "-99"})["iso_a2"] is None


def test_parent_reference():
    ref = parent_reference(map_state({"iso_a2": "US", "admin": "United States of America"}))

    assert ref.iso_a2 == "US"
    assert ref.admin == "United States of America"
    assert not ref.empty
    assert parent_reference(map_state({})).empty


def test_parse_field_mappings_requires_both_kinds():
    with pytest.raises(MappingConfigError):
        parse_field_mappings({"country": {"name": {"keys": ["NAME"]}}})


def test_parse_field_mappings_rejects_empty_keys():
    document = {"country": {"name": {"keys": []}}, "state": {"name": {"keys": ["name"]}}}

    with pytest.raises(MappingConfigError):
        parse_field_mappings(document)


def test_parse_field_mappings_builds_specs():
    document = {
        "country": {"name": {"keys": ["NAME"], "default": "Unknown"}},
        "state": {"iso_a2": {"keys": ["iso_a2"], "null_if": ["-99", ""]}},
    }

    parsed = parse_field_mappings(document)

    assert parsed[EntityKind.COUNTRY] == (FieldSpec("name", ("NAME",), "Unknown", ()),)
    assert parsed[EntityKind.STATE] == (FieldSpec("iso_a2", ("iso_a2",), None, ("-99", "")),)
