"""Expectations for the HUNTER n8n workflow."""

WORKFLOW_REPO = 'AIORA'
WORKFLOW_PATH = ('workflows/'
                 'AIORA_HUNTER_Enterprise_Market_Intelligence_v1.4.5.json')

# Agent nodes must never mask failures (alwaysOutputData / continueErrorOutput)
AGENT_NODES: tuple[str, ...] = (
    'URIEL',
    'COLOSSUS',
    'HANIEL',
    'RAZIEL',
    'SARIEL',
)

# Matched by exact name or substring
REQUIRED_NODES: tuple[str, ...] = (
    'MASTER MERGE',
    'DATA AGGREGATOR',
    'DATA VALIDATION GATE',
    'MICHA Pass 1',
    'MICHA Pass 2',
    'PAYLOAD BUILDER',
    'FORMAT',
    'EXTRACT',
    'CONSOLIDATE',
)

# Decorative nodes are never reported as orphans
DECORATIVE_NAME_MARKERS: tuple[str, ...] = ('sticky',)

ZOMBIE_ERROR_MODE = 'continueErrorOutput'
DEFAULT_ERROR_MODE = 'stopWorkflow'

# Both markers present in a node's parameters means an expression was
# pasted as literal text
UNRESOLVED_EXPRESSION_MARKERS: tuple[str, ...] = ('{{ ', '.telegrammessage }}')
