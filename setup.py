from setuptools import setup, find_packages
import os

here = os.path.abspath(os.path.dirname(__file__))
README = open(os.path.join(here, 'README.md')).read()
NEWS = open(os.path.join(here, 'NEWS.txt')).read()

version = '0.0.1'

install_requires = [
    'ply',     # python lex yacc. very cool
]

test_requires = [
    'pytest',
]

setup(
    name='openriscv-isa',
    version=version,
    description="RISC-V ISA metadata: opcodes, operand decoding, standards",
    long_description=README + '\n\n' + NEWS,
    long_description_content_type='text/markdown',
    classifiers=[
        "Topic :: Software Development",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords='riscv isa decoder opcodes',
    license='LGPLv3+',
    python_requires='>=3.8',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    package_data={'openriscv': ['isatables/*']},
    include_package_data=True,
    zip_safe=False,
    install_requires=install_requires,
    extras_require={'test': test_requires},
    entry_points={
        'console_scripts': [
            'openriscv-insndb=openriscv.insndb.db:main',
        ]
    }
)
