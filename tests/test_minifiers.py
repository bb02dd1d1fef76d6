import pytest

from minifiers.html import minify_document
from minifiers.js import build_terser_args, minify_js
from models.options import PackerOptions, TerserOptions
from packer.errors import DocumentMinifyError, ScriptMinifyError


def test_rjsmin_backend_strips_whitespace_and_comments():
    out = minify_js("var  a = 1 ;\n// note\n", PackerOptions())
    assert out.strip() == "var a=1;"


def test_terser_arguments_carry_size_options():
    args = build_terser_args("terser", TerserOptions())

    assert args[:3] == ["terser", "--ecma", "2020"]
    assert "--toplevel" in args
    assert "--keep-fnames" in args
    compress = args[args.index("--compress") + 1].split(",")
    assert "passes=3" in compress
    assert "unsafe=true" in compress
    assert args[args.index("--mangle") + 1] == "toplevel=true,safari10=true"
    assert args[args.index("--format") + 1] == "ascii_only=true"


def test_terser_arguments_omit_disabled_groups():
    args = build_terser_args("npx-terser", TerserOptions(mangle={}, ascii_only=False))
    assert "--mangle" not in args
    assert "--format" not in args


def test_missing_terser_raises_script_error():
    options = PackerOptions(
        js_backend="terser", terser_command="jampack-no-such-terser-binary"
    )
    with pytest.raises(ScriptMinifyError, match="not found"):
        minify_js("a()", options)


def test_html_minifier_failure_is_wrapped(monkeypatch):
    import minify_html

    def _boom(*args, **kwargs):
        raise RuntimeError("parser panic")

    monkeypatch.setattr(minify_html, "minify", _boom)
    with pytest.raises(DocumentMinifyError, match="parser panic"):
        minify_document("<p>x</p>", PackerOptions())


def test_html_minifier_strips_comments_and_css_whitespace():
    html = "<html><head><style>\n  p  {  color : red ;  }\n</style></head>" \
        "<body><!-- gone --><p>hi</p></body></html>"
    out = minify_document(html, PackerOptions())
    assert "gone" not in out
    assert "color : red" not in out
    assert "<p>hi" in out


@pytest.mark.parametrize(
    "source",
    [
        "let x = ;",
        "hello world // not a comment",
        "<li>{{ item }}</li>",
    ],
)
def test_rjsmin_backend_rejects_invalid_js(source):
    with pytest.raises(ScriptMinifyError, match="invalid JavaScript"):
        minify_js(source, PackerOptions())


def test_rjsmin_backend_accepts_module_syntax():
    out = minify_js("import a from './a.js';\nexport const b = a ( 1 );", PackerOptions())
    assert "b=a(1)" in out


def test_terser_backend_returns_stdout(fake_terser):
    options = PackerOptions(js_backend="terser", terser_command=fake_terser("exec cat"))
    assert minify_js("run();\n", options) == "run();"


def test_terser_backend_error_uses_first_stderr_line(fake_terser):
    command = fake_terser('echo "Parse error at 0:9" >&2\necho "detail" >&2\nexit 1')
    options = PackerOptions(js_backend="terser", terser_command=command)

    with pytest.raises(ScriptMinifyError, match="^Parse error at 0:9$"):
        minify_js("let x = ;", options)


def test_terser_backend_timeout(fake_terser):
    options = PackerOptions(
        js_backend="terser",
        terser_command=fake_terser("exec sleep 5"),
        script_timeout=0.2,
    )
    with pytest.raises(ScriptMinifyError, match="timed out"):
        minify_js("a()", options)
