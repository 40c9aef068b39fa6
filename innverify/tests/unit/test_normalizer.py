"""
tests/unit/test_normalizer.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for ResultNormalizer.

Tests cover:
  • ACTIVE → success, LIQUIDATING / LIQUIDATED → warning, none → error
  • Name, OGRN and OKVED precedence chains
  • Only the first suggestion is used
  • Malformed suggestions raise RegistryResponseError

Uses conftest fixtures: make_party, make_response.
"""
from __future__ import annotations

import pytest

from innverify.config import messages
from innverify.domain.exceptions import RegistryResponseError, TransportError
from innverify.domain.models import RegistryResponse, VerificationStatus
from innverify.services.normalizer import ResultNormalizer


@pytest.fixture
def normalizer():
    return ResultNormalizer()


class TestStatusPolicy:
    def test_active_is_success(self, normalizer, make_party, make_response):
        result = normalizer.normalize(make_response(make_party(state="ACTIVE")))
        assert result.status == VerificationStatus.SUCCESS
        assert result.message == messages.ORGANIZATION_FOUND
        assert result.company.state == "active"

    @pytest.mark.parametrize("state", ["LIQUIDATING", "LIQUIDATED", "BANKRUPT", "REORGANIZING"])
    def test_non_active_is_warning_with_company(self, normalizer, make_party, make_response, state):
        result = normalizer.normalize(make_response(make_party(state=state)))
        assert result.status == VerificationStatus.WARNING
        assert result.message == messages.ORGANIZATION_INACTIVE
        assert result.company is not None
        assert result.company.state == state.lower()

    def test_no_suggestions_is_error_without_company(self, normalizer):
        result = normalizer.normalize(RegistryResponse(suggestions=[]))
        assert result.status == VerificationStatus.ERROR
        assert result.message == messages.ORGANIZATION_NOT_FOUND
        assert result.company is None
        assert "company" not in result.to_dict()

    def test_first_suggestion_wins(self, normalizer, make_party, make_response):
        response = make_response(
            make_party(name="ООО Первая", state="LIQUIDATED"),
            make_party(name="ООО Вторая", state="ACTIVE"),
        )
        result = normalizer.normalize(response)
        assert result.company.name == "ООО Первая"
        assert result.status == VerificationStatus.WARNING


class TestNameResolution:
    def _with_names(self, make_party, **names):
        party = make_party()
        party["name"] = {"full_with_opf": None, "short_with_opf": None, "full": None, "short": None}
        party["name"].update(names)
        return party

    def test_full_with_opf_first(self, normalizer, make_party, make_response):
        party = self._with_names(
            make_party,
            full_with_opf='ОБЩЕСТВО С ОГРАНИЧЕННОЙ ОТВЕТСТВЕННОСТЬЮ "РОМАШКА"',
            short_with_opf='ООО "РОМАШКА"',
            full="РОМАШКА",
            short="РОМАШКА",
        )
        result = normalizer.normalize(make_response(party))
        assert result.company.name == 'ОБЩЕСТВО С ОГРАНИЧЕННОЙ ОТВЕТСТВЕННОСТЬЮ "РОМАШКА"'

    def test_short_with_opf_second(self, normalizer, make_party, make_response):
        party = self._with_names(make_party, full_with_opf="", short_with_opf='ООО "РОМАШКА"', full="РОМАШКА")
        result = normalizer.normalize(make_response(party))
        assert result.company.name == 'ООО "РОМАШКА"'

    def test_full_third(self, normalizer, make_party, make_response):
        party = self._with_names(make_party, full="РОМАШКА ПОЛНОЕ", short="РОМАШКА")
        result = normalizer.normalize(make_response(party))
        assert result.company.name == "РОМАШКА ПОЛНОЕ"

    def test_short_last(self, normalizer, make_party, make_response):
        party = self._with_names(make_party, short="РОМАШКА")
        result = normalizer.normalize(make_response(party))
        assert result.company.name == "РОМАШКА"

    def test_no_name_is_malformed(self, normalizer, make_party, make_response):
        party = self._with_names(make_party)
        with pytest.raises(RegistryResponseError):
            normalizer.normalize(make_response(party))


class TestRegistrationNumber:
    def test_ogrn_preferred(self, normalizer, make_party, make_response):
        party = make_party(ogrn="1027700132195", ogrnip="304500116000157")
        assert normalizer.normalize(make_response(party)).company.ogrn == "1027700132195"

    def test_falls_back_to_ogrnip(self, normalizer, make_party, make_response):
        party = make_party(ogrn=None, ogrnip="304500116000157")
        assert normalizer.normalize(make_response(party)).company.ogrn == "304500116000157"

    def test_neither_is_malformed(self, normalizer, make_party, make_response):
        party = make_party(ogrn=None)
        with pytest.raises(RegistryResponseError):
            normalizer.normalize(make_response(party))


class TestOkved:
    def test_primary_code_preferred(self, normalizer, make_party, make_response):
        party = make_party(okved="62.01", okveds=[{"code": "47.11", "name": "Торговля"}])
        assert normalizer.normalize(make_response(party)).company.okved == "62.01"

    def test_falls_back_to_first_list_entry_name(self, normalizer, make_party, make_response):
        party = make_party(
            okved=None,
            okveds=[
                {"code": "47.11", "name": "Торговля розничная"},
                {"code": "56.10", "name": "Деятельность ресторанов"},
            ],
        )
        assert normalizer.normalize(make_response(party)).company.okved == "Торговля розничная"

    def test_list_entry_without_name_uses_code(self, normalizer, make_party, make_response):
        party = make_party(okved=None, okveds=[{"code": "47.11"}])
        assert normalizer.normalize(make_response(party)).company.okved == "47.11"

    def test_omitted_when_absent(self, normalizer, make_party, make_response):
        party = make_party(okved=None, okveds=None)
        result = normalizer.normalize(make_response(party))
        assert result.company.okved is None
        assert "okved" not in result.to_dict()["company"]


class TestMalformed:
    def test_missing_state_is_transport_error(self, normalizer, make_party, make_response):
        party = make_party()
        party["state"] = None
        with pytest.raises(TransportError):
            normalizer.normalize(make_response(party))

    def test_missing_address(self, normalizer, make_party, make_response):
        party = make_party()
        party["address"] = None
        with pytest.raises(RegistryResponseError) as excinfo:
            normalizer.normalize(make_response(party))
        assert excinfo.value.message == messages.REGISTRY_MALFORMED
        assert "address" in excinfo.value.details
