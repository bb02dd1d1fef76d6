import asyncio

from bs4 import BeautifulSoup

from models.options import PackerOptions
from models.result import Degraded, Ok
from packer.errors import DocumentMinifyError
from packer.pipeline import EXIT_FAILED, EXIT_OK, pack, pack_document, run

PAGE = """<!DOCTYPE html>
<html>
<head>
<title>jam</title>
<style>
  body { margin : 0 ; }
</style>
</head>
<body>
<canvas id="c"></canvas>
<script>
  var answer = 40 + 2;
  console.log( answer );
</script>
<script type="x-shader/x-fragment">// comment
void main(){}</script>
</body>
</html>
"""


def _identity(html, options):
    return html


def test_end_to_end_minifies_js_and_shader():
    out = pack(PAGE, PackerOptions())

    scripts = BeautifulSoup(out, "html.parser").find_all("script")
    assert len(scripts) == 2
    assert "console.log(answer)" in scripts[0].string
    assert "  var" not in scripts[0].string
    assert scripts[1].string == "void main(){}"
    assert "// comment" not in out
    assert "margin : 0" not in out
    assert "SCRIPT_SLOT" not in out


def test_reassembly_preserves_document_order():
    html = "<p>1</p><script>one()</script><p>2</p><script>two()</script><p>3</p>"
    result = asyncio.run(
        pack_document(html, PackerOptions(), lambda s, o: s.upper(), _identity)
    )
    assert result.text == (
        "<p>1</p><script>ONE()</script><p>2</p><script>TWO()</script><p>3</p>"
    )


def test_js_failure_keeps_original_script_text(failing_minifier):
    html = '<body><script type="module">let x = ;</script><p>after</p></body>'
    result = asyncio.run(
        pack_document(html, PackerOptions(), failing_minifier, _identity)
    )

    assert result.text == html
    assert result.degraded_scripts == [0]
    assert isinstance(result.document_result, Ok)


def test_html_minify_failure_degrades_to_reassembled_text(echo_minifier, caplog):
    def _broken(html, options):
        raise DocumentMinifyError("bad markup")

    html = "<div>\n  <script>go()</script>\n</div>"
    result = asyncio.run(pack_document(html, PackerOptions(), echo_minifier, _broken))

    assert result.document_result == Degraded(
        text="<div>\n  <script>/*min*/go()</script>\n</div>",
        reason="bad markup",
    )
    assert result.text == result.document_result.text
    assert any("HTML minification failed" in r.getMessage() for r in caplog.records)


def test_document_without_scripts():
    result = asyncio.run(pack_document("<p>plain</p>", None, _identity, _identity))
    assert result.text == "<p>plain</p>"
    assert result.records == []


def test_run_writes_output(tmp_path):
    src = tmp_path / "index.html"
    dst = tmp_path / "index.min.html"
    src.write_text(PAGE, encoding="utf-8")

    code = asyncio.run(run(src, dst, PackerOptions()))

    assert code == EXIT_OK
    assert ">void main(){}</script>" in dst.read_text(encoding="utf-8")


def test_run_succeeds_when_a_script_fails(tmp_path, failing_minifier):
    src = tmp_path / "index.html"
    dst = tmp_path / "out.html"
    src.write_text("<script>let x = ;</script>", encoding="utf-8")

    code = asyncio.run(run(src, dst, PackerOptions(), failing_minifier, _identity))

    assert code == EXIT_OK
    assert dst.read_text(encoding="utf-8") == "<script>let x = ;</script>"


def test_run_missing_input_fails(tmp_path, caplog):
    code = asyncio.run(run(tmp_path / "nope.html", tmp_path / "out.html"))

    assert code == EXIT_FAILED
    assert not (tmp_path / "out.html").exists()
    assert any("Could not read input file" in r.getMessage() for r in caplog.records)


def test_run_unwritable_output_fails(tmp_path):
    src = tmp_path / "index.html"
    src.write_text("<p>x</p>", encoding="utf-8")

    # A directory cannot be opened for writing.
    code = asyncio.run(run(src, tmp_path, PackerOptions(), _identity, _identity))

    assert code == EXIT_FAILED


def test_run_with_default_backend_keeps_invalid_script(tmp_path, caplog):
    src = tmp_path / "index.html"
    dst = tmp_path / "index.min.html"
    broken = "\n  let x = ;\n"
    src.write_text(
        f"<html><body><script>{broken}</script>"
        "<script>\n  var  ok = 1 ;\n</script></body></html>",
        encoding="utf-8",
    )

    code = asyncio.run(run(src, dst, PackerOptions()))

    assert code == EXIT_OK
    scripts = BeautifulSoup(dst.read_text(encoding="utf-8"), "html.parser").find_all("script")
    assert scripts[0].string.strip() == broken.strip()
    assert "ok=1" in scripts[1].string
    warnings = [r for r in caplog.records if getattr(r, "script_index", None) == 0]
    assert warnings and "invalid JavaScript" in warnings[0].getMessage()
