from setuptools import setup

setup(
    name='kuroda',
    version="1.0.0",
    description="A recognizer for context sensitive grammars in Kuroda Normal Form",
    long_description="""Kuroda decides whether a word is generated by a context sensitive grammar in Kuroda Normal Form,
    and if so, reconstructs a derivation of it by searching backwards from the word to the start symbol.""",
    author="The kuroda developers",
    license="MIT",
    classifiers=[
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'Topic :: Text Processing :: General',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python :: 3',
        ],
    keywords='context sensitive grammar kuroda normal form parser',
    packages=["kuroda"],
    python_requires=">=3.6",
    entry_points={
        "console_scripts": ["kuroda = kuroda.__main__:main"],
    },
)
