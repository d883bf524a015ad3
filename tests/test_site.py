"""End-to-end tests for the public site: listings, posts, static, redirects."""

from wren.config import AppConfig
from wren.site import content_type_for
from wren.testing import TestClient


class TestContentTypes:
    def test_table(self) -> None:
        assert content_type_for("/static/a.JPG") == "image/jpeg"
        assert content_type_for("/static/site.css") == "text/css"
        assert content_type_for("/static/app.js") == "application/javascript"
        assert content_type_for("/static/favicon.ico") == "image/x-icon"

    def test_fallback(self) -> None:
        assert content_type_for("/static/blob.unknownext") == "application/octet-stream"


class TestHome:
    async def test_home_lists_posts(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.status == 200
        assert response.content_type.startswith("text/html")
        html = response.text
        assert "<header>site header</header>" in html
        assert "<footer>site footer</footer>" in html
        assert "<title>My Blog - Home</title>" in html
        assert "<p>2023</p>" in html
        assert "Page 1 of 1" in html

    async def test_previews(self, app) -> None:
        async with TestClient(app) as client:
            html = (await client.get("/")).text

        assert "<a href='/posts/hello'>Hello &lt;World&gt;</a>" in html
        assert "<p>First paragraph of hello.</p>" in html
        assert "Second body with &lt;b&gt;bold&lt;/b&gt; &amp; more" in html
        assert "Preview not available." in html
        assert "/about" not in html

    async def test_posts_in_file_order(self, app) -> None:
        async with TestClient(app) as client:
            html = (await client.get("/")).text
        assert html.index("/posts/hello") < html.index("/posts/second") < html.index("/posts/ghost")

    async def test_no_posts_is_not_found(self, site_root, config, make_app) -> None:
        (site_root / "config" / "routes.txt").write_text("# nothing yet\n")
        async with TestClient(make_app(config)) as client:
            response = await client.get("/")
        assert response.status == 404
        assert response.text == "<h1>Nothing here</h1>"

    async def test_head(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.request("HEAD", "/")
        assert response.status == 200
        assert response.body == b""


class TestPaging:
    async def test_second_page(self, site_root, make_app) -> None:
        config = AppConfig(root=site_root, posts_per_page=2)
        async with TestClient(make_app(config)) as client:
            response = await client.get("/page?p=1")

        assert response.status == 200
        html = response.text
        assert "/posts/ghost" in html
        assert "/posts/hello'" not in html
        assert "<a href='/page?p=0'>« Previous</a>" in html
        assert "Page 2 of 2" in html
        assert "Next »" not in html

    async def test_first_page_links_forward(self, site_root, make_app) -> None:
        config = AppConfig(root=site_root, posts_per_page=2)
        async with TestClient(make_app(config)) as client:
            html = (await client.get("/page")).text
        assert "<a href='/page?p=1'>Next »</a>" in html

    async def test_out_of_range(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/page?p=5")
        assert response.status == 404
        assert "Nothing here" in response.text

    async def test_non_numeric_is_first_page(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/page?p=abc")
        assert response.status == 200
        assert "Page 1 of 1" in response.text


class TestArchive:
    async def test_archive(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/archive")

        assert response.status == 200
        html = response.text
        assert "<title>Archive - All Posts</title>" in html
        assert "<p>3 posts</p>" in html
        assert "<li><a href='/posts/second'>Second Post</a></li>" in html
        assert "/about" not in html

    async def test_trailing_slash(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/archive/")
        assert response.status == 200


class TestDispatch:
    async def test_redirect(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/old-hello")
        assert response.status == 302
        assert response.header("location") == "/posts/hello"
        assert response.body == b""

    async def test_redirect_wins_over_post(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/about")
        assert response.status == 302
        assert response.header("location") == "/posts/hello"

    async def test_redirect_shadows_static_file(self, site_root, app) -> None:
        redirects = site_root / "config" / "redirects.txt"
        redirects.write_text(redirects.read_text() + "/static/cover.png|/posts/hello\n")
        async with TestClient(app) as client:
            response = await client.get("/static/cover.png")
        assert response.status == 302
        assert response.header("location") == "/posts/hello"
        assert response.body == b""

    async def test_non_ascii_redirect_target(self, site_root, app) -> None:
        redirects = site_root / "config" / "redirects.txt"
        redirects.write_text("/cafe|/posts/日本\n/latin|/posts/café\n", encoding="utf-8")
        async with TestClient(app) as client:
            wide = await client.get("/cafe")
            latin = await client.get("/latin")

        assert wide.status == 302
        assert wide.header("location") == "/posts/%E6%97%A5%E6%9C%AC"
        assert latin.status == 302
        assert latin.header("location") == "/posts/caf%C3%A9"

    async def test_post(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/posts/second")

        assert response.status == 200
        html = response.text
        assert "<title>Second Post</title>" in html
        assert "<h1>Second Post</h1>" in html
        assert "<article>Second body with &lt;b&gt;bold&lt;/b&gt; &amp; more\n</article>" in html

    async def test_post_title_escaped(self, app) -> None:
        async with TestClient(app) as client:
            html = (await client.get("/posts/hello")).text
        assert "<h1>Hello &lt;World&gt;</h1>" in html
        assert "First paragraph of hello." in html

    async def test_post_content_not_expanded(self, site_root, app) -> None:
        (site_root / "posts" / "second.md").write_text("{{TITLE}} and {{YEAR}}")
        async with TestClient(app) as client:
            html = (await client.get("/posts/second")).text
        assert "<article>{{TITLE}} and {{YEAR}}</article>" in html

    async def test_post_file_missing(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/posts/ghost")
        assert response.status == 404
        assert response.text == "<h1>Nothing here</h1>"

    async def test_unmapped_path(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/nowhere")
        assert response.status == 404
        assert response.text == "<h1>Nothing here</h1>"

    async def test_missing_404_template(self, site_root, app) -> None:
        (site_root / "templates" / "404.html").unlink()
        async with TestClient(app) as client:
            response = await client.get("/nowhere")
        assert response.status == 404
        assert response.body == b""

    async def test_content_answers_any_method(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/posts/second")
        assert response.status == 200


class TestStatic:
    async def test_stylesheet_under_static(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/style.css")
        assert response.status == 200
        assert response.content_type == "text/css"
        assert response.header("cache-control") == "max-age=86400"
        assert response.text == "body { color: #333; }"

    async def test_binary(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/cover.png")
        assert response.content_type == "image/png"
        assert response.body == b"\x89PNG\r\n\x1a\n"

    async def test_unknown_extension(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/notes.unknownext")
        assert response.content_type == "application/octet-stream"

    async def test_missing_static(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/none.css")
        assert response.status == 404

    async def test_traversal(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/../config/routes.txt")
        assert response.status == 404

    async def test_root_stylesheet(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/style.css")
        assert response.status == 200
        assert response.content_type == "text/css"

    async def test_root_stylesheet_missing(self, site_root, app) -> None:
        (site_root / "static" / "style.css").unlink()
        async with TestClient(app) as client:
            response = await client.get("/style.css")
        assert response.status == 404
        assert response.content_type.startswith("text/plain")
        assert response.text == "CSS file not found"


class TestMethods:
    async def test_post_to_home(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/")
        assert response.status == 405
        assert response.header("allow") == "GET, HEAD"


class TestTrafficLog:
    async def test_requests_are_logged(self, site_root, app) -> None:
        async with TestClient(app) as client:
            await client.get("/", headers={"User-Agent": "pytest-agent"})
            await client.get("/old-hello")
            await client.get("/nowhere")

        lines = (site_root / "logs" / "access.log").read_text().splitlines()
        assert len(lines) == 3
        assert lines[0].endswith('127.0.0.1 - GET / - 200 - "pytest-agent"')
        assert "GET /old-hello - 302 - " in lines[1]
        assert lines[2].endswith('GET /nowhere - 404 - "-"')

    async def test_query_string_logged(self, site_root, app) -> None:
        async with TestClient(app) as client:
            await client.get("/page?p=0")
        log = (site_root / "logs" / "access.log").read_text()
        assert "GET /page?p=0 - 200" in log

    async def test_disabled(self, site_root, make_app) -> None:
        config = AppConfig(root=site_root, traffic_log=False)
        async with TestClient(make_app(config)) as client:
            await client.get("/")
        assert not (site_root / "logs").exists()

    async def test_post_bodies_are_untouched(self, site_root, app) -> None:
        async with TestClient(app) as client:
            await client.get("/posts/second")
        body = (site_root / "posts" / "second.md").read_text()
        assert body == "Second body with <b>bold</b> & more\n"


class TestStorageFailure:
    async def test_storage_error_page(self, site_root, app) -> None:
        from wren.errors import StorageError

        def broken(request) -> str:
            raise StorageError("/posts/a.md", "open", "device busy")

        app.add_route("/broken", broken)
        async with TestClient(app) as client:
            response = await client.get("/broken")

        assert response.status == 500
        assert response.text == "<h1>Storage Error</h1>"
        log = (site_root / "logs" / "access.log").read_text()
        assert "GET /broken - 500" in log
