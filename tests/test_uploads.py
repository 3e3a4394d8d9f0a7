from io import BytesIO


def test_upload_photo(client, app, login):
    login("operator")
    resp = client.post(
        "/api/upload",
        data={"file": (BytesIO(b"\x89PNG fake"), "photo.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    url = resp.get_json()["photoUrl"]
    assert url.startswith("http://testserver/uploads/") and url.endswith(".png")

    served = client.get(url.replace("http://testserver", ""))
    assert served.status_code == 200
    assert served.data == b"\x89PNG fake"
    served.close()


def test_upload_rejects_other_types(client, login):
    login("admin")
    resp = client.post(
        "/api/upload",
        data={"file": (BytesIO(b"%PDF"), "doc.pdf", "application/pdf")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert "file" in resp.get_json()["details"]["fieldErrors"]


def test_upload_without_file(client, login):
    login("admin")
    assert client.post("/api/upload", data={}, content_type="multipart/form-data").status_code == 400


def test_viewer_cannot_upload(client, login):
    login("viewer")
    resp = client.post(
        "/api/upload",
        data={"file": (BytesIO(b"x"), "photo.jpg", "image/jpeg")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 403
