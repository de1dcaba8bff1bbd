from payroll_app.core.models import StatutoryRequest
from payroll_app.core.validate.pre_submit import (
    explain_statutory_request,
    validate_statutory_request,
)
from tests.fixtures.min_employee import make_request_payload


def test_valid_request_has_no_issues():
    req = StatutoryRequest.model_validate(make_request_payload())
    assert validate_statutory_request(req) == []


def test_negative_amounts():
    payload = make_request_payload(salary=-1, additional_remuneration=-5)
    issues = validate_statutory_request(payload)
    assert issues == ["salary_negative", "additional_remuneration_negative"]


def test_period_and_age_ranges():
    req = StatutoryRequest.model_validate(make_request_payload(period=13, age=130))
    assert set(validate_statutory_request(req)) == {"period_out_of_range", "age_out_of_range"}
    assert validate_statutory_request(req, periods_per_year=52) == ["age_out_of_range"]


def test_child_breakdown():
    payload = make_request_payload(
        profile={"number_of_children": 1, "children_in_higher_education": 1, "disabled_children": 1}
    )
    assert validate_statutory_request(payload) == ["child_breakdown_exceeds_total"]
    payload["profile"]["number_of_children"] = -1
    assert "child_count_negative" in validate_statutory_request(payload)


def test_ytd_codes_deduplicated_but_explained_per_field():
    payload = make_request_payload(ytd={"gross": -1, "epf": -2})
    assert validate_statutory_request(payload) == ["ytd_negative_amount"]
    detailed = explain_statutory_request(payload)
    assert [issue.field for issue in detailed] == ["ytd.gross", "ytd.epf"]
    assert all(issue.severity == "error" for issue in detailed)
