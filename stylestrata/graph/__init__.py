from stylestrata.graph.digraph import DirectedGraph, VertexKey

__all__ = ["DirectedGraph", "VertexKey"]
