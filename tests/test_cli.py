## luascript — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _env() -> dict:
    env = os.environ.copy()
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [str(repo_root() / "src"), env.get('PYTHONPATH')]))
    return env


def run_cli(*cli_args: str | Path, stdin: str | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "luascript", "--plain", *(str(arg) for arg in cli_args)]
    return subprocess.run(args, input=stdin, capture_output=True, text=True, env=_env())


def test_cli_runs_script_file():
    result = run_cli(repo_root() / "tests" / "count.luascript")
    assert result.returncode == 0, result.stdout + result.stderr
    assert result.stdout.splitlines() == ["1", "2", "3", "done"]


def test_cli_reads_stdin_when_piped():
    result = run_cli(stdin='print("IMPLICIT")\n')
    assert result.returncode == 0, result.stdout + result.stderr
    assert "IMPLICIT" in result.stdout


def test_cli_inline_command_prints_result():
    result = run_cli("-c", "1 + 2 * 3")
    assert result.returncode == 0, result.stdout + result.stderr
    assert result.stdout.strip() == "7"


def test_cli_runs_files_and_commands_in_order():
    result = run_cli(repo_root() / "tests" / "count.luascript", "-c", 'print("SECOND")')
    assert result.returncode == 0, result.stdout + result.stderr
    assert result.stdout.splitlines() == ["1", "2", "3", "done", "SECOND"]


def test_cli_syntax_error_shows_context():
    file_path = repo_root() / "tests" / "error-parser.luascript"
    result = run_cli(file_path)
    assert result.returncode != 0
    out = result.stdout
    assert "SYNTAX ERROR." in out
    assert f'File "{file_path}", line 6' in out
    assert "local x = 4" in out
    assert "\033[" not in out


def test_cli_runtime_error_names_kind():
    result = run_cli(repo_root() / "tests" / "error-runtime.luascript")
    assert result.returncode != 0
    out = result.stdout
    assert "RUNTIME ERROR." in out
    assert "ArgumentType" in out
    assert "Argument 2 of `area` expected `number`, got `string`." in out


def test_cli_ignore_keeps_going_but_still_fails():
    result = run_cli("-i", "-c", "missing", "-c", 'print("AFTER")')
    assert result.returncode == 1
    assert "UndefinedVariable" in result.stdout
    assert "AFTER" in result.stdout


def test_cli_stats_and_trace():
    result = run_cli("--stats", "-v", repo_root() / "tests" / "count.luascript")
    assert result.returncode == 0, result.stdout + result.stderr
    out = result.stdout
    assert "STATISTICS." in out
    assert "call\t1" in out
    assert "count(3)" in out


def test_cli_tokens_and_ast_commands():
    file_path = repo_root() / "tests" / "count.luascript"
    tokens = run_cli("tokens", file_path)
    assert tokens.returncode == 0, tokens.stdout + tokens.stderr
    assert "keyword" in tokens.stdout and "type-name" in tokens.stdout

    ast = run_cli("ast", file_path)
    assert ast.returncode == 0, ast.stdout + ast.stderr
    assert "fn count(n: number) {" in ast.stdout
    assert "count(3);" in ast.stdout
