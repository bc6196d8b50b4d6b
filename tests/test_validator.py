from structhash import ErrorCollector, ErrorKind, define_schema, normalize, validate


def kinds_by_path(errors):
    return {p: [v.kind for v in errors.violations if v.path == p] for p in errors}


PERSON = define_schema(lambda s: (
    s.key("name", str, required=True, format=r"^[A-Z]")
     .key("age", int)
     .key("tags", list, block=lambda t: t.value(str))
     .key("address", dict, block=lambda a: a.key("city", str, required=True))
))


def test_valid_document():
    doc = {"name": "Ada", "age": 36, "tags": ["x"], "address": {"city": "London"}}
    assert validate(PERSON, doc).is_empty()


def test_all_sibling_errors_reported_in_one_pass():
    doc = {"age": "old", "extra": 1, "tags": ["a", 2, "c", 4], "address": {}}
    errors = kinds_by_path(validate(PERSON, doc))
    assert errors == {
        ("extra",): [ErrorKind.UNEXPECTED_FIELD],
        ("name",): [ErrorKind.MISSING_REQUIRED_FIELD],
        ("age",): [ErrorKind.TYPE_MISMATCH],
        ("tags", 1): [ErrorKind.TYPE_MISMATCH],
        ("tags", 3): [ErrorKind.TYPE_MISMATCH],
        ("address", "city"): [ErrorKind.MISSING_REQUIRED_FIELD],
    }


def test_shape_errors_stop_descent():
    errors = kinds_by_path(validate(PERSON, {"name": "Ada", "tags": "x", "address": [1]}))
    assert errors == {
        ("tags",): [ErrorKind.NOT_A_SEQUENCE],
        ("address",): [ErrorKind.NOT_A_MAPPING],
    }


def test_format_uses_search_on_text_form():
    assert validate(PERSON, {"name": "Ada"}).is_empty()
    errors = validate(PERSON, {"name": "ada"})
    assert errors.kinds("name") == [ErrorKind.FORMAT_MISMATCH]
    assert errors["name"] == ["does not match /^[A-Z]/"]


def test_bool_is_not_an_integer():
    errors = validate(PERSON, {"name": "Ada", "age": True})
    assert errors["age"] == ["expected an integer, got bool"]


def test_float_field_accepts_floats_only():
    s = define_schema(lambda s: s.key("ratio", float, required=True))
    assert validate(s, {"ratio": 0.5}).is_empty()
    assert not validate(s, {"ratio": 1}).is_empty()


def test_explicit_null_counts_as_present():
    s = define_schema(lambda s: s.key("a", int).key("b", int, nullable=True).key("c", int, required=True, nullable=True))
    assert validate(s, {"b": None, "c": None}).is_empty()
    errors = validate(s, {"a": None, "c": None})
    assert errors.kinds("a") == [ErrorKind.TYPE_MISMATCH]


def test_top_level_sequence_schema():
    s = define_schema(lambda s: s.value(dict, block=lambda e: e.key("id", int, required=True)))
    assert validate(s, [{"id": 1}, {"id": 2}]).is_empty()
    assert validate(s, []).is_empty()
    errors = validate(s, [{"id": 1}, {}, {"id": "x"}])
    assert kinds_by_path(errors) == {
        (1, "id"): [ErrorKind.MISSING_REQUIRED_FIELD],
        (2, "id"): [ErrorKind.TYPE_MISMATCH],
    }
    assert validate(s, {"id": 1}).kinds("$") == [ErrorKind.NOT_A_SEQUENCE]


def test_null_elements():
    optional = define_schema(lambda s: s.value(int))
    required = define_schema(lambda s: s.value(int, required=True))
    nullable = define_schema(lambda s: s.value(int, required=True, nullable=True))
    assert validate(optional, [1, None]).is_empty()
    assert validate(required, [1, None]).kinds("[1]") == [ErrorKind.MISSING_REQUIRED_FIELD]
    assert validate(nullable, [1, None]).is_empty()


def test_nested_arrays():
    s = define_schema(lambda s: s.key("grid", list, block=lambda g: g.value(list, block=lambda r: r.value(int))))
    assert validate(s, {"grid": [[1, 2], [3]]}).is_empty()
    errors = validate(s, {"grid": [[1, 2], [3, "x"], 4]})
    assert kinds_by_path(errors) == {
        ("grid", 1, 1): [ErrorKind.TYPE_MISMATCH],
        ("grid", 2): [ErrorKind.NOT_A_SEQUENCE],
    }


def test_open_dict_and_list_fields():
    s = define_schema(lambda s: s.key("meta", dict).key("items", list))
    assert validate(s, {"meta": {"anything": [1]}, "items": [1, "a", None]}).is_empty()


def test_empty_schema_is_closed():
    s = define_schema()
    assert validate(s, {}).is_empty()
    assert validate(s, {"a": 1}).kinds("a") == [ErrorKind.UNEXPECTED_FIELD]


def test_path_prefix_and_shared_collector():
    inner = define_schema(lambda s: s.key("x", int, required=True))
    collector = ErrorCollector()
    validate(inner, {}, ("outer", 3), collector)
    validate(inner, {"x": "y"}, ("outer", 4), collector)
    assert list(collector) == [("outer", 3, "x"), ("outer", 4, "x")]


def test_prefixing_matches_merging():
    inner = define_schema(lambda s: s.key("x", int, required=True).key("y", str))
    threaded = validate(inner, {"y": 1, "z": 0}, ("a", 0))
    merged = ErrorCollector()
    merged.merge(validate(inner, {"y": 1, "z": 0}), ("a", 0))
    assert threaded.violations == merged.violations


def test_custom_check_sees_document_and_siblings():
    seen = {}

    def range_matches(ctx):
        seen["name"] = ctx.name
        seen["root"] = ctx.document["limits"]["max"]
        if ctx.value > ctx.parent["max"]:
            ctx.add("must not exceed max")

    s = define_schema(lambda s: s.key("limits", dict, required=True, block=lambda lim: (
        lim.key("max", int, required=True).key("min", int, required=True, check=range_matches))))
    assert validate(s, {"limits": {"max": 5, "min": 1}}).is_empty()
    assert seen == {"name": "min", "root": 5}
    errors = validate(s, {"limits": {"max": 5, "min": 9}})
    assert errors["limits.min"] == ["must not exceed max"]


def test_multiple_checks_all_run():
    def positive(ctx):
        if ctx.value <= 0:
            ctx.add("must be positive")

    def even(ctx):
        if ctx.value % 2:
            ctx.add("must be even")

    s = define_schema(lambda s: s.key("n", int, check=[positive, even]))
    assert validate(s, {"n": -3})["n"] == ["must be positive", "must be even"]


def test_depth_limit_on_raw_recursion():
    s = define_schema(lambda s: s.value(list, block=lambda r: r.value(list, block=lambda q: q.value(int))))
    errors = validate(s, [[[1]]], max_depth=1)
    assert errors.kinds("[0][0]") == [ErrorKind.TOO_DEEP]


def test_deep_input_never_raises():
    deep = "[" * 5000 + "]" * 5000
    s = define_schema(lambda s: s.key("a", int))
    errors = validate(s, normalize(deep))
    assert errors.kinds("$") == [ErrorKind.NOT_A_MAPPING]


def test_idempotent():
    doc = {"age": "old", "extra": 1, "tags": ["a", 2]}
    assert validate(PERSON, doc).violations == validate(PERSON, doc).violations
