"""Demo script showing stage gating for a few branches"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from stagegate.gates import branch_matches, trunk_only
from stagegate.models import ExecutionContext
from stagegate.pipeline import PipelineDefinition, StageSpec


MARKER_FILE = Path(__file__).parent / 'config' / 'stagegate.properties'

PIPELINE = PipelineDefinition([
    StageSpec('build', 'stage.build.enabled', default=True),
    StageSpec('unit tests', 'stage.test.unit.enabled', default=True),
    StageSpec('integration tests', 'stage.test.integration.enabled'),
    StageSpec('security scan', 'stage.security.scan.enabled', default=True),
    StageSpec('deploy dev', 'stage.deploy.dev.enabled',
              predicate=branch_matches('feature/*', 'main')),
    StageSpec('deploy prod', 'stage.deploy.prod.enabled', predicate=trunk_only()),
])


def demo_branch(branch: str):
    """Demo: evaluate the sample marker file on one branch"""
    print("=" * 70)
    print(f"Branch: {branch}")
    print("=" * 70)

    context = ExecutionContext(branch=branch)
    for decision in PIPELINE.evaluate_file(MARKER_FILE, context):
        mark = "RUN " if decision.enabled else "SKIP"
        print(f"  [{mark}] {decision.stage:<20} {decision.reason}")
    print()


def main():
    """Run all demos"""
    print(f"\nMarker file: {MARKER_FILE}\n")
    for branch in ('main', 'feature/login', 'hotfix/1.2'):
        demo_branch(branch)


if __name__ == '__main__':
    main()
