import pathlib
import subprocess

from invoke import task

import PdfCompare

ROOT = pathlib.Path(__file__).parent.resolve().as_posix()
utests_completed_process = None


@task
def utests(context):
    cmd = [
        "coverage",
        "run",
        "--source=PdfCompare",
        "-p",
        "-m",
        "pytest",
        "--junitxml=results/pytest.xml",
        f"{ROOT}/utest",
    ]
    global utests_completed_process
    utests_completed_process = subprocess.run(" ".join(cmd), shell=True, check=False)


@task(utests)
def tests(context):
    coverage_report(context)
    if utests_completed_process.returncode != 0:
        raise Exception("Tests failed")


@task
def coverage_report(context):
    subprocess.run("coverage combine", shell=True, check=False)
    subprocess.run("coverage report", shell=True, check=False)
    subprocess.run("coverage html -d results/htmlcov", shell=True, check=False)


@task
def readme(context):
    doc_string = PdfCompare.__doc__ or ""
    with open(f"{ROOT}/README.md", "w", encoding="utf-8") as readme:
        readme.write(str(doc_string).strip() + "\n")
