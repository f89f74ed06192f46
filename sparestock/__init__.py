# SpareStock - sparepart stock ledger
