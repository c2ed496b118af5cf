from pathlib import Path
from bru2openapi.parser.bru import parse_bru, parse_bru_file, split_key_value, split_query

FIXTURES = Path(__file__).parent / "fixtures"


class TestDefaults:
    def test_empty_text(self):
        req = parse_bru("")
        assert req.method == "get"
        assert req.name == "Unnamed"
        assert req.url == ""
        assert req.headers == {}
        assert req.query == {}
        assert req.path_params == {}
        assert req.body == ""
        assert req.body_type == ""
        assert req.tag == ""

    def test_garbage_does_not_fail(self):
        req = parse_bru("}}}\n{{{\n:::\nnot a section\n}\nbody:json {\n{")
        assert req.method == "get"
        assert req.name == "Unnamed"

    def test_unclosed_body_is_flushed_at_end(self):
        req = parse_bru('body:json {\n  {"a": 1}\n')
        assert req.body == '{"a": 1}'
        assert req.body_type == "json"


class TestSections:
    def test_method_block_with_url(self):
        req = parse_bru("get {\n  url: /users/{id}\n}")
        assert req.method == "get"
        assert req.url == "/users/{id}"

    def test_method_name_is_case_insensitive(self):
        req = parse_bru("POST {\n  url: /items\n}")
        assert req.method == "post"

    def test_unknown_verb_is_ignored_section(self):
        req = parse_bru("fetch {\n  url: /nope\n}")
        assert req.method == "get"
        assert req.url == ""

    def test_meta_name_method_and_url(self):
        req = parse_bru("meta {\n  name: List things\n  method: DELETE\n  url: /things\n}")
        assert req.name == "List things"
        assert req.method == "delete"
        assert req.url == "/things"

    def test_meta_unknown_method_keeps_previous(self):
        req = parse_bru("put {\n}\nmeta {\n  method: brew\n}")
        assert req.method == "put"

    def test_meta_empty_name_keeps_default(self):
        req = parse_bru("meta {\n  name:\n}")
        assert req.name == "Unnamed"

    def test_headers_keep_case_and_colons(self):
        req = parse_bru("headers {\n  X-Callback: http://example.com:8080/cb\n  Accept: */*\n}")
        assert req.headers == {"X-Callback": "http://example.com:8080/cb", "Accept": "*/*"}

    def test_params_path_and_params_query(self):
        text = "params:path {\n  id: 42\n}\nparams:query {\n  limit: 5\n}"
        req = parse_bru(text)
        assert req.path_params == {"id": "42"}
        assert req.query == {"limit": "5"}

    def test_ignored_section_content_is_discarded(self):
        text = "vars:pre-request {\n  url: /wrong\n  name: wrong\n}\nget {\n  url: /right\n}"
        req = parse_bru(text)
        assert req.url == "/right"
        assert req.name == "Unnamed"

    def test_crlf_line_endings(self):
        req = parse_bru("meta {\r\n  name: Windows\r\n}\r\npost {\r\n  url: /w\r\n}\r\n")
        assert req.name == "Windows"
        assert req.method == "post"
        assert req.url == "/w"


class TestQueryMerge:
    def test_url_query_folded_into_query(self):
        req = parse_bru("get {\n  url: /search?q=hello+world&page=2\n}")
        assert req.url == "/search"
        assert req.query == {"q": "hello world", "page": "2"}

    def test_explicit_query_wins_after_url(self):
        req = parse_bru("get {\n  url: /x?a=1\n}\nquery {\n  a: 2\n}")
        assert req.query["a"] == "2"

    def test_explicit_query_wins_before_url(self):
        req = parse_bru("params:query {\n  a: 2\n}\nget {\n  url: /x?a=1&b=3\n}")
        assert req.query == {"a": "2", "b": "3"}


class TestBody:
    def test_nested_braces_close_at_outer_brace(self):
        text = (
            "body:json {\n"
            "  {\n"
            '    "user": {\n'
            '      "name": "Ada"\n'
            "    }\n"
            "  }\n"
            "}\n"
            "headers {\n"
            "  X-After: yes\n"
            "}\n"
        )
        req = parse_bru(text)
        assert req.body.startswith("{")
        assert req.body.endswith("}")
        assert '"name": "Ada"' in req.body
        assert req.headers == {"X-After": "yes"}

    def test_section_header_inside_body_opens_new_section(self):
        text = 'body:json {\n  {\n    "a": 1,\n  headers {\n    X-Late: 1\n  }\n}\n'
        req = parse_bru(text)
        assert req.headers == {"X-Late": "1"}
        assert req.body == '{\n    "a": 1,'
        assert req.body_type == "json"

    def test_body_keeps_inner_blank_lines(self):
        req = parse_bru("body:text {\n  first\n\n  second\n}")
        assert req.body == "first\n\n  second"
        assert req.body_type == "text"

    def test_body_without_subtype(self):
        req = parse_bru("body {\n  hello\n}")
        assert req.body == "hello"
        assert req.body_type == ""

    def test_empty_body_section(self):
        req = parse_bru("body:json {\n}")
        assert req.body == ""
        assert req.body_type == "json"

    def test_braces_in_strings_are_counted(self):
        req = parse_bru('body:json {\n  {\n    "pattern": "}"\n  }\n}')
        assert req.body == '{\n    "pattern": "}"'


class TestHelpers:
    def test_split_key_value_without_colon(self):
        assert split_key_value("flag") == ("flag", "")

    def test_split_key_value_keeps_later_colons(self):
        assert split_key_value(" url :  https://h:1/p ") == ("url", "https://h:1/p")

    def test_split_query_without_question_mark(self):
        assert split_query("/plain") == ("/plain", {})

    def test_split_query_first_value_wins(self):
        assert split_query("/x?a=1&a=2&flag") == ("/x", {"a": "1", "flag": ""})

    def test_split_query_keeps_empty_key(self):
        assert split_query("/x?=v&b=1") == ("/x", {"": "v", "b": "1"})

    def test_split_query_unparseable_keeps_path(self):
        assert split_query("/x?a=%zz") == ("/x", {})
        assert split_query("/x?a=1;b=2") == ("/x", {})


class TestParseFile:
    def test_parse_fixture_file(self):
        req = parse_bru_file(FIXTURES / "collection" / "users" / "create-user.bru")
        assert req.name == "Create user"
        assert req.method == "post"
        assert req.url == "{{baseUrl}}/users"
        assert req.headers == {"Content-Type": "application/json"}
        assert req.body_type == "json"
        assert '"city": "London"' in req.body
        assert "expect" not in req.body
