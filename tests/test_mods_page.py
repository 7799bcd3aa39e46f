import unittest

from modpanel.exceptions import DownloadError, UpstreamError
from modpanel.models import (
    FileInfo,
    ModLoader,
    ModSummary,
    ModVersion,
    NotificationStatus,
    Outcome,
    Server,
)
from modpanel.pages import ModsPage


SERVER = Server(uuid="8d1f2c3a", name="survival")


class FakeClient:
    def __init__(self, hits=None, versions=None, urls=None, search_error=None):
        self.hits = hits or []
        self.versions = versions or {}
        self.urls = urls or {}
        self.search_error = search_error
        self.queries = []
        self.version_calls = []
        self.closed = False

    async def search(self, query):
        self.queries.append(query)
        if self.search_error:
            raise self.search_error
        return self.hits[: query.limit]

    async def get_versions(self, mod_id, loaders=None, game_versions=None):
        self.version_calls.append((mod_id, list(loaders or []), list(game_versions or [])))
        return self.versions.get(mod_id, [])

    async def resolve_download_url(self, version_id):
        return self.urls.get(version_id, "")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True


class FakeOrchestrator:
    def __init__(self, error=None):
        self.error = error
        self.downloads = []

    def get_mods_directory(self, server):
        return "mods"

    async def download_many(self, server, items, directory="mods"):
        self.downloads.append((server, list(items), directory))
        if self.error:
            raise self.error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


def make_version(version_id, url, filename):
    return ModVersion(id=version_id, files=[FileInfo(url=url, filename=filename)])


HITS = [
    ModSummary(mod_id="jei", title="Just Enough Items", description="Item viewer"),
    ModSummary(mod_id="sodium", title="Sodium", description="Rendering engine"),
]


class TestModsPage(unittest.IsolatedAsyncioTestCase):
    def make_page(self, client=None, orchestrator=None):
        self.client = client or FakeClient(hits=HITS)
        self.orchestrator = orchestrator or FakeOrchestrator()
        return ModsPage(
            SERVER,
            client_factory=lambda: self.client,
            orchestrator_factory=lambda: self.orchestrator,
        )

    async def test_search_returns_options(self):
        page = self.make_page()
        page.game_version = "1.19.2"
        options = await page.search_mods("jei")

        self.assertEqual(
            options,
            {
                "jei": "Just Enough Items - Item viewer",
                "sodium": "Sodium - Rendering engine",
            },
        )
        query = self.client.queries[0]
        self.assertEqual(query.query, "jei")
        self.assertEqual(query.limit, 20)
        self.assertEqual(query.game_version, "1.19.2")
        self.assertEqual(query.loader, ModLoader.FORGE)
        self.assertTrue(self.client.closed)

    async def test_empty_query_does_not_search(self):
        page = self.make_page()
        self.assertEqual(await page.search_mods(""), {})
        self.assertEqual(self.client.queries, [])

    async def test_search_failure_notifies(self):
        page = self.make_page(FakeClient(search_error=UpstreamError("service unavailable")))
        options = await page.search_mods("jei")

        self.assertEqual(options, {})
        notification = page.notifications[-1]
        self.assertEqual(notification.title, "Search Failed")
        self.assertEqual(notification.body, "Failed to search mods: service unavailable")
        self.assertEqual(notification.status, NotificationStatus.DANGER)

    async def test_search_without_results_warns(self):
        page = self.make_page(FakeClient(hits=[]))
        await page.search_mods("zzzz")
        notification = page.notifications[-1]
        self.assertEqual(notification.title, "No mods found")
        self.assertNotEqual(notification.body, notification.title)
        self.assertTrue(notification.body)

    async def test_empty_selection_is_rejected(self):
        page = self.make_page()
        outcome = await page.download_selected_mods()

        self.assertEqual(outcome, Outcome.NO_SELECTION)
        self.assertEqual(page.notifications[-1].title, "No Mods Selected")
        self.assertEqual(self.client.version_calls, [])
        self.assertEqual(self.orchestrator.downloads, [])

    async def test_downloads_latest_version(self):
        client = FakeClient(
            hits=HITS,
            versions={
                "sodium": [
                    make_version("v2", "https://x/a.jar", "a.jar"),
                    make_version("v1", "https://x/old.jar", "old.jar"),
                ]
            },
            urls={"v2": "https://x/a.jar", "v1": "https://x/old.jar"},
        )
        page = self.make_page(client)
        page.mod_loader = ModLoader.FABRIC
        page.game_version = "1.20.1"
        await page.search_mods("sodium")
        page.select(["sodium"])

        outcome = await page.download_selected_mods()

        self.assertEqual(outcome, Outcome.SUCCESS)
        self.assertEqual(client.version_calls, [("sodium", ["fabric"], ["1.20.1"])])
        server, items, directory = self.orchestrator.downloads[0]
        self.assertEqual(server, SERVER)
        self.assertEqual(directory, "mods")
        self.assertEqual([(i.url, i.filename) for i in items], [("https://x/a.jar", "a.jar")])
        self.assertEqual(page.notifications[-1].title, "Download Started")
        self.assertEqual(page.selected_mods, [])
        self.assertEqual(page.search_results, [])

    async def test_no_compatible_versions(self):
        page = self.make_page()
        await page.search_mods("jei")
        page.select(["jei", "sodium"])

        outcome = await page.download_selected_mods()

        self.assertEqual(outcome, Outcome.NO_VERSIONS)
        self.assertEqual(page.notifications[-1].title, "No Compatible Versions")
        self.assertEqual(self.orchestrator.downloads, [])
        self.assertEqual(page.selected_mods, ["jei", "sodium"])

    async def test_version_without_files_is_skipped(self):
        client = FakeClient(
            hits=HITS,
            versions={"jei": [ModVersion(id="v9", files=[])]},
        )
        page = self.make_page(client)
        await page.search_mods("jei")
        page.select(["jei"])

        self.assertEqual(await page.download_selected_mods(), Outcome.NO_VERSIONS)

    async def test_selection_outside_results_is_ignored(self):
        client = FakeClient(
            hits=HITS,
            versions={"create": [make_version("c1", "https://x/c.jar", "c.jar")]},
            urls={"c1": "https://x/c.jar"},
        )
        page = self.make_page(client)
        await page.search_mods("jei")
        page.select(["create"])

        self.assertEqual(await page.download_selected_mods(), Outcome.NO_VERSIONS)
        self.assertEqual(client.version_calls, [])

    async def test_download_failure_notifies(self):
        client = FakeClient(
            hits=HITS,
            versions={"jei": [make_version("j1", "https://x/jei.jar", "jei.jar")]},
            urls={"j1": "https://x/jei.jar"},
        )
        orchestrator = FakeOrchestrator(error=DownloadError("下载 'jei.jar' 失败: disk full"))
        page = self.make_page(client, orchestrator)
        await page.search_mods("jei")
        page.select(["jei"])

        outcome = await page.download_selected_mods()

        self.assertEqual(outcome, Outcome.FAILED)
        notification = page.notifications[-1]
        self.assertEqual(notification.title, "Download Failed")
        self.assertTrue(notification.body.startswith("Failed to download mods: "))
        self.assertEqual(notification.status, NotificationStatus.DANGER)

    async def test_version_lookup_failure_notifies(self):
        class FailingVersions(FakeClient):
            async def get_versions(self, mod_id, loaders=None, game_versions=None):
                raise UpstreamError("rate limited")

        page = self.make_page(FailingVersions(hits=HITS))
        await page.search_mods("jei")
        page.select(["jei"])

        self.assertEqual(await page.download_selected_mods(), Outcome.FAILED)
        self.assertEqual(page.notifications[-1].body, "Failed to download mods: rate limited")


if __name__ == "__main__":
    unittest.main()
