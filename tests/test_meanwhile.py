import allure
from click.testing import CliRunner

from meanwhile import __version__
from meanwhile.main import meanwhile

pytestmark = [
    allure.epic("CLI"),
    allure.feature("Version"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(meanwhile, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
