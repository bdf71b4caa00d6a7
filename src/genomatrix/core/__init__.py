"""
Core data types shared by every stage of an import.

1. CanonicalGene / GeneType: resolved gene identities
2. GeneticProfile / GeneticAlterationType / CnaCode: import destination and value codes
3. GeneticAlterationRow / CnaEvent: records handed to the storage collaborators
"""

from genomatrix.core.alteration import CnaEvent, CnaEventKey, GeneticAlterationRow
from genomatrix.core.gene import CanonicalGene, GeneType
from genomatrix.core.profile import CnaCode, GeneticAlterationType, GeneticProfile

__all__ = [
    'CanonicalGene',
    'GeneType',
    'GeneticProfile',
    'GeneticAlterationType',
    'CnaCode',
    'GeneticAlterationRow',
    'CnaEvent',
    'CnaEventKey',
]
