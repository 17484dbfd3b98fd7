# astgen/order/__init__.py
from .graph import Graph, topo_sort, topo_sort_groups, strongly_connected_components
from .rules import RuleSet, GenOptions, generate
