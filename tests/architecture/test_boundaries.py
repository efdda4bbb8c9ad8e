from pytest_archon import archrule


def test_criteria_model_is_engine_independent() -> None:
    """
    The criteria model must not know about any query engine.
    Engines depend on it, never the other way around.
    """
    (
        archrule("criteria_is_independent")
        .match("search_criteria*")
        .exclude("search_criteria_elasticsearch*")
        .should_not_import("search_criteria_elasticsearch*")
        .check("search_criteria")
    )


def test_operator_strategies_do_not_import_compilers() -> None:
    """
    Operator strategies only build leaves; chain walking stays in the compilers.
    """
    (
        archrule("operators_are_leaves")
        .match("search_criteria_elasticsearch.operators*")
        .should_not_import("search_criteria_elasticsearch.compiler")
        .should_not_import("search_criteria_elasticsearch.filters")
        .should_not_import("search_criteria_elasticsearch.facade")
        .check("search_criteria_elasticsearch")
    )


def test_compilers_do_not_import_facade() -> None:
    """
    The facade wires itself into the compiler as sub-query callback.
    """
    for module in ("compiler", "filters"):
        (
            archrule(f"{module}_below_facade")
            .match(f"search_criteria_elasticsearch.{module}")
            .should_not_import("search_criteria_elasticsearch.facade")
            .check("search_criteria_elasticsearch")
        )
