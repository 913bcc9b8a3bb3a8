"""RepoSentry - codebase intelligence reports generated from your repository.

Example:
    >>> from reposentry.orchestrator import AnalysisOptions, Orchestrator
    >>> from reposentry.core.backend import GenerationBackend
    >>> run = Orchestrator(AnalysisOptions(root_dir=Path(".")), GenerationBackend()).run()
    >>> print(run.overall.grade.value)
    B+
"""

__version__ = "0.1.0"
