from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..application.services.catalog_service import CatalogService
from ..dependencies import get_catalog_service, get_current_admin
from ..schemas import InvoiceCreate, InvoiceUpdate, InvoiceResponse, MessageResponse
from ..schemas.billing.invoice import InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[InvoiceResponse])
def list_invoices(
    search: Optional[str] = Query(None),
    status: Optional[InvoiceStatus] = Query(None),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_invoices(search=search, status=status)


@router.post("", response_model=InvoiceResponse, status_code=201)
def create_invoice(payload: InvoiceCreate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_invoice(payload.model_dump())


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_invoice(invoice_id)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(invoice_id: int, payload: InvoiceUpdate, service: CatalogService = Depends(get_catalog_service)):
    return service.update_invoice(invoice_id, payload.changes())


@router.delete("/{invoice_id}", response_model=MessageResponse)
def delete_invoice(invoice_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_invoice(invoice_id)
    return MessageResponse(message="Invoice deleted successfully")
