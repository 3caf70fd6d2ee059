"""Tests for no-node-env-in-ssr."""
RULE = 'no-node-env-in-ssr'


def test_reachable_function_is_reported(lint):
    code = """function isDev() {
    return process.env.NODE_ENV !== 'production';
}
function other() {
    return someOther.env.NODE_ENV;
}
export default class Flag extends LightningElement {
    connectedCallback() {
        this.dev = isDev() && other();
    }
}
"""
    violations = lint(code, RULE)

    assert len(violations) == 1
    assert violations[0].line == 2
    assert violations[0].message_id == 'nodeEnvFound'
    assert violations[0].data == {'identifier': 'NODE_ENV'}


def test_module_scope_is_reported(lint):
    violations = lint("export const DEBUG = process.env.NODE_ENV === 'development';", RULE)

    assert [v.line for v in violations] == [1]


def test_unreachable_code_is_ignored(lint):
    code = """export default class Flag extends LightningElement {
    renderedCallback() {
        console.log(process.env.NODE_ENV);
    }
}
function neverCalled() { return process.env.NODE_ENV; }
"""
    assert lint(code, RULE) == []


def test_escape_guard_is_respected(lint):
    code = """if (typeof window !== 'undefined') {
    init(process.env.NODE_ENV);
}"""
    assert lint(code, RULE) == []


def test_other_env_properties_are_ignored(lint):
    assert lint("const mode = process.env.MODE;\nconst env = process.env;", RULE) == []
