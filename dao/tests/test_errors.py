from dao.errors import (AccountNotFound, DaoError, InvalidTransaction,
                        MalformedTransaction, error_to_result_fields)


def test_codes_and_messages():
    assert MalformedTransaction("bad", field="from").to_dict() == {
        "code": "MALFORMED_TX",
        "message": "bad",
        "data": {"field": "from"},
    }
    assert InvalidTransaction("nope").to_dict() == {"code": "INVALID_TX", "message": "nope"}
    err = AccountNotFound("abc")
    assert str(err) == "account abc doesn't exist"
    assert isinstance(err, DaoError)


def test_error_to_result_fields():
    fields = error_to_result_fields(InvalidTransaction("late"))
    assert fields["success"] is False
    assert fields["reason"] == "late"
    assert fields["error"]["code"] == "INVALID_TX"
