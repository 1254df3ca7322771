from pathlib import Path
import subprocess
import sys


__all__ = ['task_check']


def task_check():
    """Check - check onecode with flake8"""
    return {'actions': [(_run_flake8, [Path('src_py')]),
                        (_run_flake8, [Path('test_pytest')]),
                        (_run_flake8, [Path('src_doit')])]}


def _run_flake8(path):
    subprocess.run([sys.executable, '-m', 'flake8', '.'],
                   cwd=str(path),
                   check=True)
