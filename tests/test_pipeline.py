"""End-to-end pipeline tests against fakes."""
from conftest import (
    FakeAccounts,
    FakeConverter,
    FakeDisks,
    FakeFetcher,
    FakeLauncher,
    FakePackageManager,
    FakeVcs,
    make_ctx,
    make_tools,
)
from kvm_macos_setup.main import build_steps, provision


def _snapshot(root):
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class TestProvisioning:
    """Full provisioning runs."""

    def _tools(self):
        return make_tools(
            packages=FakePackageManager(installed={"git", "wget"}),
            vcs=FakeVcs(),
            fetcher=FakeFetcher(),
            converter=FakeConverter(),
            disks=FakeDisks(),
            accounts=FakeAccounts(groups={"alice"}),
            launcher=FakeLauncher(),
        )

    def test_first_run_converges(self, home):
        tools = self._tools()
        ctx = make_ctx(
            home,
            tools=tools,
            answers=["Intel", "64G", "yes", "OpenCore-Boot.sh", "8192", "1", "4", "8", "no", "1"],
        )

        result = provision(ctx)

        toolkit = home / "OSX-KVM"
        assert (toolkit / "BaseSystem.img").exists()
        assert (toolkit / "mac_hdd_ng.img").exists()
        assert tools.launcher.launched == [toolkit / "OpenCore-Boot.sh"]
        assert result.state["errors"] == []
        assert result.state["decisions"]["kvm_vendor"] == "intel"
        assert "90_launch" in result.satisfied_steps

    def test_second_run_changes_nothing(self, home):
        """Re-running re-downloads, re-clones, re-converts and re-creates nothing."""
        tools = self._tools()
        first = make_ctx(
            home,
            tools=tools,
            answers=["amd", "32G", "yes", "boot-windows.sh", "", "", "", "", "no", "2"],
        )
        provision(first)
        after_first = _snapshot(home)

        second = make_ctx(home, tools=tools, answers=["no", "2"])
        result = provision(second)

        assert _snapshot(home) == after_first
        assert result.changed_steps == []
        assert tools.vcs.calls == ["clone", "fetch"]
        assert tools.fetcher.calls == 1
        assert len(tools.converter.calls) == 1
        assert len(tools.disks.calls) == 1
        assert tools.packages.update_calls == 1
        assert len(tools.accounts.added) == 3
        assert second.operator.remaining == 0

    def test_steps_run_in_order(self):
        ids = [s.step_id for s in build_steps()]

        assert ids == sorted(ids)
        assert ids[0] == "10_install_packages"
        assert ids[-1] == "90_launch"
