from setuptools import setup, find_packages
import datetime

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pdf-visual-compare",
    version="0.1.0.dev" + datetime.datetime.now().strftime("%Y%m%d%H%M%S"),
    description="Visual regression testing for PDF documents",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["utest", "utest.*"]),
    python_requires=">=3.8",
    install_requires=['PyMuPDF', 'numpy', 'opencv-python-headless', 'Pillow', 'pixelmatch', 'python-dotenv', 'Wand'],
    extras_require={'test': ['pytest', 'coverage', 'invoke']},
    dependency_links=['https://www.ghostscript.com/download/gsdnld.html', 'https://imagemagick.org/script/download.php'],
    zip_safe=False
)
