"""Domain layer for lawledger.

Services are imported from their modules (``lawledger.domain.transaction``
and so on); entities and the aggregation engine have no store dependency.
"""
