from emitlog.templates import MessageTemplate, format_value, template_id


def test_render_substitutes_placeholders():
    template = MessageTemplate("Hello, {name} at {time} in {room}!")
    message = template.render({"name": "User", "time": 2139, "room": "office"})
    assert message == "Hello, User at 2139 in office!"


def test_missing_property_renders_empty():
    template = MessageTemplate("The number is {number}")
    assert template.render({}) == "The number is "


def test_placeholders_are_case_sensitive():
    template = MessageTemplate("The number is {Number}")
    assert template.render({"number": 42}) == "The number is "


def test_unmatched_braces_are_literal():
    template = MessageTemplate("a { b {x} c {}")
    assert template.render({"x": 1}) == "a { b 1 c {}"


def test_placeholders_listed_in_order():
    template = MessageTemplate("{b} then {a} then {b}")
    assert template.placeholders == ["b", "a", "b"]


def test_template_id_matches_known_value():
    assert template_id("The number is {number}") == "ae9bf784"


def test_template_id_depends_only_on_text():
    template = MessageTemplate("The number is {number}")
    assert template.id == MessageTemplate("The number is {number}").id
    assert template.id != MessageTemplate("The count is {number}").id
    assert len(template.id) == 8


def test_format_value():
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(None) == ""
    assert format_value(1.5) == "1.5"
    assert format_value({"b": 1, "a": "x"}) == '{"a":"x","b":1}'
