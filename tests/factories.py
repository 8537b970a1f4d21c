"""Backend documents as the REST API returns them"""


def customer_doc(_id="c1", code="CUS001", name="Asha Rao", mobile="9876543210", **extra):
    """Customer document as the backend returns it"""
    doc = {
        "_id": _id,
        "uniqueCode": code,
        "name": name,
        "mobile": mobile,
        "createdAt": "2024-01-10T09:00:00.000Z",
        "updatedAt": "2024-01-10T09:00:00.000Z",
    }
    doc.update(extra)
    return doc


def vehicle_doc(_id="v1", number="KA01AB1234", make="Honda", model="City", **extra):
    doc = {
        "_id": _id,
        "vehicleNumber": number,
        "make": make,
        "vehicleModel": model,
        "createdAt": "2024-01-10T09:00:00.000Z",
    }
    doc.update(extra)
    return doc


def order_doc(_id="o1", number="ORD-0001", customer_id="c1", vehicle_id="v1", services=None, **extra):
    services = services if services is not None else [{"name": "Oil change", "amount": 40.0}]
    doc = {
        "_id": _id,
        "orderNumber": number,
        "customerId": customer_id,
        "vehicleId": vehicle_id,
        "services": services,
        "totalAmount": sum(s["amount"] for s in services),
        "createdAt": "2024-01-11T10:00:00.000Z",
    }
    doc.update(extra)
    return doc
