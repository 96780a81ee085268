"""The runtime interface, VM messages and results, and the contract handler."""