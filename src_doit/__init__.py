from pathlib import Path
import itertools
import shutil

from .check import *  # NOQA
from .test import *  # NOQA
from . import check
from . import test


__all__ = (['task_clean_all'] +
           check.__all__ +
           test.__all__)


build_dir = Path('build')
dist_dir = Path('dist')
src_py_dir = Path('src_py')


def task_clean_all():
    """Clean all"""

    def clean():
        src_py_patterns = ['__pycache__',
                           '*.egg-info']
        targets = [build_dir,
                   dist_dir,
                   *itertools.chain.from_iterable(src_py_dir.rglob(i)
                                                  for i in src_py_patterns)]
        for target in targets:
            if target.is_dir():
                shutil.rmtree(str(target), ignore_errors=True)
            elif target.exists():
                target.unlink()

    return {'actions': [clean]}
