from dataclasses import FrozenInstanceError

import pytest
from starlette.datastructures import QueryParams

from donations.gateway.response import CallbackResponse, parse_callback


class TestParseCallback:
    def test_maps_gateway_names_to_fields(self, signed_callback):
        params = signed_callback()
        response = parse_callback(params)

        assert response.txn_ref == params["pp_TxnRefNo"]
        assert response.amount == "500"
        assert response.bill_reference == "CAMP_1"
        assert response.retrieval_reference == "240115482913"
        assert response.secure_hash == params["pp_SecureHash"]

    def test_missing_fields_default_to_empty(self):
        response = parse_callback({"pp_TxnRefNo": "TXN_1"})

        assert response.txn_ref == "TXN_1"
        assert response.response_code == ""
        assert response.secure_hash == ""
        assert response.amount == ""

    def test_empty_input_never_raises(self):
        assert parse_callback({}) == CallbackResponse()

    def test_none_values_become_empty(self):
        response = parse_callback({"pp_Amount": None})
        assert response.amount == ""

    def test_values_kept_verbatim(self):
        response = parse_callback({"pp_Description": "  Eid donation  "})
        assert response.description == "  Eid donation  "

    def test_accepts_query_params(self):
        params = QueryParams("pp_TxnRefNo=TXN_9&pp_ResponseCode=105&pp_Amount=250")
        response = parse_callback(params)

        assert response.txn_ref == "TXN_9"
        assert response.response_code == "105"
        assert response.amount == "250"

    def test_unknown_parameters_ignored(self):
        response = parse_callback({"pp_TxnRefNo": "TXN_1", "utm_source": "sms"})
        assert response.txn_ref == "TXN_1"


class TestCallbackResponse:
    def test_is_immutable(self):
        response = parse_callback({"pp_Amount": "500"})
        with pytest.raises(FrozenInstanceError):
            response.amount = "5000"

    def test_signed_fields_exclude_secure_hash(self, signed_callback):
        response = parse_callback(signed_callback())
        signed = response.signed_fields()

        assert "pp_SecureHash" not in signed
        assert signed["pp_RetreivalReferenceNo"] == "240115482913"
        assert len(signed) == 14
