"""Tests for value-object construction from stored records."""

from datetime import datetime, timezone

import pytest

from shifai.models import PatientData, PatientProfile, SymptomEntry, TriageLevel, parse_timestamp


class TestParseTimestamp:
    def test_epoch_seconds(self):
        assert parse_timestamp(1741600000) == datetime(2025, 3, 10, 9, 46, 40, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        assert parse_timestamp(1741600000000) == parse_timestamp(1741600000)

    def test_iso_string_with_z(self):
        assert parse_timestamp("2025-03-01T10:00:00Z") == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 1e20, float("nan"), True])
    def test_unusable_values_are_none(self, value):
        assert parse_timestamp(value) is None


class TestFromDict:
    def test_profile_passes_through(self):
        profile = PatientProfile(age=70)
        assert PatientProfile.from_dict(profile) is profile

    def test_patient_data_with_profile_object(self):
        data = PatientData.from_dict({"profile": PatientProfile(age=70), "entries": []})
        assert data.profile.age == 70
        assert data.patient_id == ""

    def test_patient_id_from_profile_uid(self):
        data = PatientData.from_dict({"profile": {"uid": "u7"}, "entries": []})
        assert data.patient_id == "u7"

    def test_unknown_tier_is_safe(self):
        entry = SymptomEntry.from_dict({"symptoms": "rash", "triageLevel": "critical"})
        assert entry.triage_level == TriageLevel.SAFE
