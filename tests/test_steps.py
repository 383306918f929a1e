import os
from dataclasses import replace

import pytest

from cytonaut_bootstrap.context import BootstrapCtx
from cytonaut_bootstrap.errors import (
    ExternalTaskFailed,
    MissingManifest,
    ToolInstallFailed,
    VerificationIncomplete,
)
from cytonaut_bootstrap.steps import (
    ChainedTasksStep,
    ConfirmAuxiliaryToolStep,
    EnsurePixiStep,
    InstallBaseDependenciesStep,
    LocateManifestStep,
    VerifyPackagesStep,
)


@pytest.fixture
def ctx(cfg, project, tmp_path):
    system_bin = str(tmp_path / "usr" / "bin")
    return BootstrapCtx.create(cfg, project_dir=project, search_path=system_bin, color=False)


@pytest.fixture
def ready(ctx):
    return ctx.evolve(pixi_exe="/usr/bin/pixi")


class TestLocateManifest:
    def test_found(self, ctx):
        assert LocateManifestStep().run(ctx) is ctx

    def test_missing(self, ctx, tmp_path):
        empty = tmp_path / "elsewhere"
        empty.mkdir()
        with pytest.raises(MissingManifest) as exc:
            LocateManifestStep().run(ctx.evolve(project_dir=empty))
        assert exc.value.exit_code == 1
        assert "pixi.toml not found" in str(exc.value)
        assert "repo root" in str(exc.value)

    def test_directory_named_like_manifest_is_not_enough(self, ctx, tmp_path):
        odd = tmp_path / "odd"
        (odd / "pixi.toml").mkdir(parents=True)
        with pytest.raises(MissingManifest):
            LocateManifestStep().run(ctx.evolve(project_dir=odd))


class TestEnsurePixi:
    def test_already_installed_skips_installer(self, ctx, runner, which):
        which.present.add(ctx.search_path)
        out = EnsurePixiStep().run(ctx)

        assert out.pixi_exe == os.path.join(ctx.search_path, "pixi")
        assert out.search_path == ctx.search_path
        assert not runner.ran("bash")

    def test_installs_and_extends_search_path(self, ctx, cfg, runner, which):
        runner.when("bash", side_effect=lambda argv: which.present.add(cfg.install_dir_path))
        out = EnsurePixiStep().run(ctx)

        assert runner.ran("bash", "-c")
        script = [a for a in runner.argvs() if a[0] == "bash"][0][2]
        assert "curl -fsSL https://pixi.sh/install/install.sh | bash" in script
        assert out.pixi_exe == os.path.join(cfg.install_dir_path, "pixi")
        assert out.search_path.split(os.pathsep)[0] == cfg.install_dir_path
        # version probe sees the extended path
        version_call = [c for c in runner.calls if c.argv[-1] == "--version"][-1]
        assert version_call.env == {"PATH": out.search_path}

    def test_install_that_leaves_no_binary_fails(self, ctx, runner, which):
        runner.when("bash", returncode=22)
        with pytest.raises(ToolInstallFailed) as exc:
            EnsurePixiStep().run(ctx)
        assert exc.value.exit_code == 1
        assert "https://pixi.sh" in str(exc.value)
        assert len([a for a in runner.argvs() if a[0] == "bash"]) == 1

    def test_dry_run_assumes_install(self, ctx, cfg, runner, which):
        out = EnsurePixiStep().run(ctx.evolve(dry_run=True))
        assert out.pixi_exe == os.path.join(cfg.install_dir_path, "pixi")


class TestInstallBase:
    def test_runs_pixi_install_in_project(self, ready, runner, project):
        InstallBaseDependenciesStep().run(ready)

        call = runner.calls[-1]
        assert call.argv == ["/usr/bin/pixi", "install"]
        assert call.cwd == str(project)
        assert call.capture is False

    def test_failure_propagates_code(self, ready, runner):
        runner.when("install", returncode=5)
        with pytest.raises(ExternalTaskFailed) as exc:
            InstallBaseDependenciesStep().run(ready)
        assert exc.value.exit_code == 5


class TestChainedTasks:
    def test_runs_all_in_order(self, ready, runner):
        ChainedTasksStep().run(ready)
        assert [a[2] for a in runner.argvs()] == ["configure", "bioconductor-install", "github-install"]

    def test_failure_stops_chain_with_its_code(self, ready, runner):
        runner.when("bioconductor-install", returncode=3)
        with pytest.raises(ExternalTaskFailed) as exc:
            ChainedTasksStep().run(ready)

        assert exc.value.exit_code == 3
        assert not runner.ran("github-install")
        assert runner.ran("configure")

    def test_no_tasks(self, ready, runner):
        ChainedTasksStep().run(ready.evolve(cfg=replace(ready.cfg, chained_tasks=())))
        assert runner.calls == []


class TestVerifyPackages:
    def test_all_present(self, ready, runner, rout, capsys):
        runner.when("Rscript", stdout=rout({"Seurat": True, "ggplot2": True, "here": True}))
        out = VerifyPackagesStep().run(ready)

        assert out.verification.ok
        assert "3 / 3 packages verified" in capsys.readouterr().out

    def test_partial_fails(self, ready, runner, rout, capsys):
        runner.when("Rscript", stdout=rout({"Seurat": True, "ggplot2": False, "here": True}))
        with pytest.raises(VerificationIncomplete) as exc:
            VerifyPackagesStep().run(ready)

        assert exc.value.exit_code == 1
        assert exc.value.result.satisfied == 2
        assert exc.value.result.total == 3
        assert "2 / 3 packages verified" in capsys.readouterr().out


class TestConfirmAuxiliaryTool:
    def test_quarto_version(self, ready, runner):
        ConfirmAuxiliaryToolStep().run(ready)
        assert runner.argvs()[-1] == ["/usr/bin/pixi", "run", "--", "quarto", "--version"]

    def test_missing_quarto(self, ready, runner):
        runner.when("quarto", returncode=127)
        with pytest.raises(ExternalTaskFailed) as exc:
            ConfirmAuxiliaryToolStep().run(ready)
        assert exc.value.exit_code == 127
