from tap_reader.models import (
    ManyToken,
    Plan,
    PlanToken,
    TapDocument,
    TapTestToken,
    TitleToken,
    YamlDocToken,
)


def test_token_types():
    assert PlanToken(1, 2).type == "testPlan"
    assert TitleToken(ok=True).type == "tapTestTitle"
    assert YamlDocToken(()).type == "yamlDocLines"
    assert ManyToken("lines", ()).type == "lines"


def test_title_to_dict_omits_missing_fields():
    assert TitleToken(ok=False).to_dict() == {"type": "tapTestTitle", "ok": False}
    assert TitleToken(ok=True, test_number=3, description="d", directive="skip").to_dict() == {
        "type": "tapTestTitle",
        "ok": True,
        "testNumber": 3,
        "description": "d",
        "diagnostic": "skip",
    }


def test_document_defaults():
    document = TapDocument()

    assert document.version == 13
    assert document.test_plan is None
    assert document.diagnostics == ()
    assert document.tests == ()


def test_document_to_dict_matches_output_shape():
    test = TapTestToken(TitleToken(ok=True, test_number=1), YamlDocToken(("a: 1",)))
    failing = TapTestToken(TitleToken(ok=False, test_number=2), YamlDocToken(()))
    document = TapDocument(test_plan=Plan(1, 2), diagnostics=("note",), tests=(test, failing))

    assert document.passed == 1
    assert document.failed == 1
    assert document.to_dict() == {
        "version": 13,
        "testPlan": {"start": 1, "through": 2},
        "diagnostics": ["note"],
        "tests": [
            {
                "type": "tapTest",
                "title": {"type": "tapTestTitle", "ok": True, "testNumber": 1},
                "yamlDocContents": {"type": "yamlDocLines", "yamlDocLines": ["a: 1"]},
            },
            {
                "type": "tapTest",
                "title": {"type": "tapTestTitle", "ok": False, "testNumber": 2},
                "yamlDocContents": {"type": "yamlDocLines", "yamlDocLines": []},
            },
        ],
    }


def test_document_to_dict_omits_missing_plan():
    assert "testPlan" not in TapDocument().to_dict()
