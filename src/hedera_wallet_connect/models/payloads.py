"""
Per-method request parameters and results for the six Hedera JSON-RPC methods.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# 1. hedera_getNodeAddresses takes no params
class GetNodeAddressesResult(_Payload):
    nodes: list[str]


# 2. hedera_executeTransaction
class ExecuteTransactionParams(_Payload):
    transaction_list: str = Field(alias="transactionList")


# 3. hedera_signMessage
class SignMessageParams(_Payload):
    signer_account_id: str = Field(alias="signerAccountId")
    message: str


class SignMessageResult(_Payload):
    signature_map: str = Field(alias="signatureMap")


# 4. hedera_signAndExecuteQuery
class SignAndExecuteQueryParams(_Payload):
    signer_account_id: str = Field(alias="signerAccountId")
    query: str


class SignAndExecuteQueryResult(_Payload):
    response: str


# 5. hedera_signAndExecuteTransaction
class SignAndExecuteTransactionParams(_Payload):
    signer_account_id: str = Field(alias="signerAccountId")
    transaction_list: str = Field(alias="transactionList")


# 6. hedera_signTransaction
class SignTransactionParams(_Payload):
    signer_account_id: str = Field(alias="signerAccountId")
    transaction_body: str = Field(alias="transactionBody")


class SignTransactionResult(_Payload):
    signature_map: str = Field(alias="signatureMap")
